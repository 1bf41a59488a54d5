#! /usr/bin/env python

from setuptools import setup

setup(
    name="neutraldrift",
    version="0.1.0",
    author="Jeet Sukumaran",
    author_email="jeetsukumaran@gmail.com",
    packages=["neutraldrift"],
    scripts=["bin/neutraldrift-simulate.py",
            ],
    url="http://pypi.python.org/pypi/neutraldrift/",
    license="LICENSE.txt",
    description="Neutral community drift and migration simulator",
    long_description=open("README.rst").read(),
    install_requires=[
        "dendropy",
        "pandas",
        ],
)
