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

r"""
Log-series species abundance distribution.

Under Fisher's log-series, the probability that a species is represented by
exactly $k$ individuals is:

    P(k) = \frac{-1}{\ln(1-x)} \frac{x^k}{k},    k = 1, 2, ...

where, for a community of $J$ individuals and Fisher's alpha $\alpha$:

    x = \frac{J}{J + \alpha}

and the expected number of species is $S = -\alpha \ln(1 - x)$.

Note that $1 - x = \alpha / (J + \alpha)$, which is how it is calculated
here to avoid the cancellation error of subtracting from one when $J$ is
large.
"""

import math
from neutraldrift.utility import ParameterError
from neutraldrift.utility import NumericRangeError

def check_logseries_parameters(size, alpha):
    if alpha <= 0:
        raise ParameterError("Fisher's alpha must be positive: {}".format(alpha))
    if size <= 0 or int(size) != size:
        raise ParameterError("Community size must be a positive integer: {}".format(size))
    try:
        fsize = float(size)
    except OverflowError:
        raise NumericRangeError("Community size cannot be represented as a floating point value: {}".format(size))
    if fsize + 1.0 == fsize or fsize - 1.0 == fsize:
        raise NumericRangeError("Community size too large to be resolved to the nearest individual: {}".format(size))

def logseries_parameter(size, alpha):
    """
    Returns the log-series parameter, $x$, for a community of `size`
    individuals with Fisher's alpha of `alpha`.
    """
    check_logseries_parameters(size, alpha)
    return float(size) / (size + alpha)

def _log_one_minus_x(size, alpha):
    return math.log(float(alpha) / (size + alpha))

def logseries_mean(size, alpha):
    r"""
    Returns the expected abundance of a species under the log-series,
    $-x / ((1-x) \ln(1-x))$.
    """
    check_logseries_parameters(size, alpha)
    # x / (1-x) == size / alpha
    return (float(size) / alpha) / -_log_one_minus_x(size, alpha)

def expected_species_richness(size, alpha):
    r"""
    Returns the number of species expected in a community of `size`
    individuals with Fisher's alpha of `alpha`, $-\alpha \ln(\alpha / (J + \alpha))$,
    truncated to an integer.
    """
    check_logseries_parameters(size, alpha)
    return int(math.floor(-alpha * _log_one_minus_x(size, alpha)))

class LogSeriesSampler(object):
    r"""
    Draws abundances from a log-series distribution by inverting its
    cumulative distribution function.

    Rather than evaluating the cumulative probability from scratch for each
    draw, the uniform variates are sorted, and a single upward sweep over the
    abundance classes serves all of them, with the probability of each class
    obtained from that of the previous one:

        P(k+1) = P(k) \frac{k x}{k + 1}

    The cost is thus proportional to the number of draws plus the largest
    abundance drawn, which, for very large communities, may itself be large.
    """

    def __init__(self, rng, progress=None):
        """
        Parameters
        ----------
        rng : ``random.Random``
            Source of random numbers.
        progress : callable or `None`
            If given, called as ``progress(num_completed, num_requested)``
            after each value is assigned. It has no effect on the values
            drawn.
        """
        self.rng = rng
        self.progress = progress

    def draw(self, n, size, alpha, preserve_draw_order=False):
        """
        Returns a list of `n` abundances drawn independently from a log-series
        with parameter ``x = size / (size + alpha)``.

        By default, values are returned in ascending order, i.e., the i-th
        value corresponds to the uniform variate of rank i. If
        `preserve_draw_order` is `True`, the i-th value corresponds to the
        i-th uniform variate drawn instead. Either way, the same `rng` state
        results in the same collection of values.
        """
        if n < 0:
            raise ParameterError("Number of draws must not be negative: {}".format(n))
        x = logseries_parameter(size, alpha)
        uniforms = [self.rng.random() for i in range(n)]
        ranked_indexes = sorted(range(n), key=uniforms.__getitem__)
        abundances = [0] * n
        k = 1
        p = -x / _log_one_minus_x(size, alpha)
        cdf = p
        for rank, draw_idx in enumerate(ranked_indexes):
            u = uniforms[draw_idx]
            while cdf <= u:
                p = p * k * x / (k + 1)
                k += 1
                if cdf + p == cdf:
                    raise NumericRangeError("Cumulative probability saturated at {} before reaching {} (abundance {})".format(cdf, u, k))
                cdf += p
            if preserve_draw_order:
                abundances[draw_idx] = k
            else:
                abundances[rank] = k
            if self.progress is not None:
                self.progress(rank + 1, n)
        return abundances
