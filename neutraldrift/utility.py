#! /usr/bin/env python

##############################################################################
##
##  Copyright 2010-2014 Jeet Sukumaran.
##  All rights reserved.
##
##  Redistribution and use in source and binary forms, with or without
##  modification, are permitted provided that the following conditions are met:
##
##      * Redistributions of source code must retain the above copyright
##        notice, this list of conditions and the following disclaimer.
##      * Redistributions in binary form must reproduce the above copyright
##        notice, this list of conditions and the following disclaimer in the
##        documentation and/or other materials provided with the distribution.
##      * The names of its contributors may not be used to endorse or promote
##        products derived from this software without specific prior written
##        permission.
##
##  THIS SOFTWARE IS PROVIDED BY THE COPYRIGHT HOLDERS AND CONTRIBUTORS "AS
##  IS" AND ANY EXPRESS OR IMPLIED WARRANTIES, INCLUDING, BUT NOT LIMITED TO,
##  THE IMPLIED WARRANTIES OF MERCHANTABILITY AND FITNESS FOR A PARTICULAR
##  PURPOSE ARE DISCLAIMED. IN NO EVENT SHALL JEET SUKUMARAN OR MARK T. HOLDER
##  BE LIABLE FOR ANY DIRECT, INDIRECT, INCIDENTAL, SPECIAL, EXEMPLARY, OR
##  CONSEQUENTIAL DAMAGES (INCLUDING, BUT NOT LIMITED TO, PROCUREMENT OF
##  SUBSTITUTE GOODS OR SERVICES; LOSS OF USE, DATA, OR PROFITS; OR BUSINESS
##  INTERRUPTION) HOWEVER CAUSED AND ON ANY THEORY OF LIABILITY, WHETHER IN
##  CONTRACT, STRICT LIABILITY, OR TORT (INCLUDING NEGLIGENCE OR OTHERWISE)
##  ARISING IN ANY WAY OUT OF THE USE OF THIS SOFTWARE, EVEN IF ADVISED OF THE
##  POSSIBILITY OF SUCH DAMAGE.
##
##############################################################################

import os
import bisect
import logging

_LOGGING_LEVEL_ENVAR = "NEUTRALDRIFT_LOGGING_LEVEL"

class NeutralDriftError(Exception):
    pass

class ParameterError(NeutralDriftError, ValueError):
    """
    A model or run parameter is outside of its valid domain.
    """
    pass

class NumericRangeError(NeutralDriftError, OverflowError):
    """
    A value cannot be resolved exactly in floating point arithmetic (e.g., a
    metacommunity so large that adding one individual does not change its
    size).
    """
    pass

class CapacityError(NeutralDriftError, IndexError):
    """
    A recording structure with a fixed capacity was asked to hold more
    entries than it can.
    """
    pass

class CumulativeWeights(object):
    """
    Pre-computed running totals of a fixed sequence of (non-negative) weights,
    allowing an index to be selected with probability proportional to its
    weight in logarithmic time by bisection.
    """

    def __init__(self, weights):
        self.cumulative = []
        total = 0
        for w in weights:
            if w < 0:
                raise ValueError("Negative weight: {}".format(w))
            total += w
            self.cumulative.append(total)
        self.total = total
        if self.total <= 0:
            raise ValueError("No positive weights to choose from")

    def __len__(self):
        return len(self.cumulative)

    def index_choice(self, rng):
        # weights are integer abundances in general, so this can be exact
        if isinstance(self.total, int):
            rnd = rng.randrange(self.total)
        else:
            rnd = rng.uniform(0, 1) * self.total
        return min(bisect.bisect_right(self.cumulative, rnd), len(self.cumulative)-1)

class RunLogger(object):

    def __init__(self, **kwargs):
        self.name = kwargs.get("name", "RunLog")
        self._log = logging.getLogger(self.name)
        self._log.setLevel(logging.DEBUG)
        self.handlers = []
        if kwargs.get("log_to_stderr", True):
            handler1 = logging.StreamHandler()
            stderr_logging_level = self.get_logging_level(kwargs.get("stderr_logging_level", logging.INFO))
            handler1.setLevel(stderr_logging_level)
            handler1.setFormatter(self.get_default_formatter())
            self._log.addHandler(handler1)
            self.handlers.append(handler1)
        if kwargs.get("log_to_file", True):
            log_stream = kwargs.get("log_stream", None)
            if log_stream is None:
                log_stream = open(kwargs.get("log_path", self.name + ".log"), "w")
            handler2 = logging.StreamHandler(log_stream)
            file_logging_level = self.get_logging_level(kwargs.get("file_logging_level", logging.DEBUG))
            handler2.setLevel(file_logging_level)
            handler2.setFormatter(self.get_default_formatter())
            self._log.addHandler(handler2)
            self.handlers.append(handler2)
        self._system = None

    def _get_system(self):
        return self._system

    def _set_system(self, system):
        self._system = system
        if self._system is None:
            for handler in self.handlers:
                handler.setFormatter(self.get_default_formatter())
        else:
            for handler in self.handlers:
                handler.setFormatter(self.get_simulation_step_formatter())

    system = property(_get_system, _set_system)

    def get_logging_level(self, level=None):
        if level in [logging.NOTSET, logging.DEBUG, logging.INFO, logging.WARNING,
            logging.ERROR, logging.CRITICAL]:
            return level
        elif level is not None:
            level_name = str(level).upper()
        elif _LOGGING_LEVEL_ENVAR in os.environ:
            level_name = os.environ[_LOGGING_LEVEL_ENVAR].upper()
        else:
            level_name = "NOTSET"
        if level_name == "NOTSET":
            level = logging.NOTSET
        elif level_name == "DEBUG":
            level = logging.DEBUG
        elif level_name == "INFO":
            level = logging.INFO
        elif level_name == "WARNING":
            level = logging.WARNING
        elif level_name == "ERROR":
            level = logging.ERROR
        elif level_name == "CRITICAL":
            level = logging.CRITICAL
        else:
            level = logging.NOTSET
        return level

    def get_default_formatter(self):
        f = logging.Formatter("[%(asctime)s] %(message)s")
        f.datefmt='%Y-%m-%d %H:%M:%S'
        return f

    def get_simulation_step_formatter(self):
        f = logging.Formatter("[%(asctime)s] Step %(current_step)s: %(message)s")
        f.datefmt='%Y-%m-%d %H:%M:%S'
        return f

    def supplemental_info_d(self):
        if self._system is not None:
            return {
                    "current_step" : self._system.current_step,
                    }
        else:
            return None

    def debug(self, msg, *args, **kwargs):
        self._log.debug(msg, *args, extra=self.supplemental_info_d())

    def info(self, msg, *args, **kwargs):
        self._log.info(msg, *args, extra=self.supplemental_info_d())

    def warning(self, msg, *args, **kwargs):
        self._log.warning(msg, *args, extra=self.supplemental_info_d())

    def close(self):
        for handler in self.handlers:
            self._log.removeHandler(handler)
            handler.flush()
        self.handlers = []
