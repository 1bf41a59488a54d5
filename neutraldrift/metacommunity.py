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

import string
import collections
import collections.abc
from neutraldrift import logseries
from neutraldrift import utility
from neutraldrift.utility import ParameterError

class SpeciesLabeler(object):
    """
    Maps consecutive indexes to unique labels composed from `alphabet`: with
    the default settings, "AAA", "AAB", ..., "ZZZ", then "AAAA", and so on.
    """

    def __init__(self, alphabet=string.ascii_uppercase, min_length=3):
        if len(alphabet) < 2 or len(set(alphabet)) != len(alphabet):
            raise ValueError("Alphabet must consist of at least two distinct symbols: '{}'".format(alphabet))
        self.alphabet = alphabet
        self.min_length = min_length

    def label(self, index):
        if index < 0:
            raise ValueError("Label index must not be negative: {}".format(index))
        nsymbols = len(self.alphabet)
        length = self.min_length
        while index >= nsymbols ** length:
            index -= nsymbols ** length
            length += 1
        chars = []
        for i in range(length):
            index, r = divmod(index, nsymbols)
            chars.append(self.alphabet[r])
        return "".join(reversed(chars))

    def labels(self, count):
        return [self.label(i) for i in range(count)]

class Metacommunity(collections.abc.Mapping):
    """
    The species pool from which local communities are sampled and
    immigrants are drawn: an immutable mapping of species to abundances.
    Since it is never modified after construction, a single instance can be
    shared by any number of simulations.
    """

    def __init__(self, abundances, alpha=None, nominal_size=None):
        """
        Parameters
        ----------
        abundances : mapping or iterable of (species, abundance) pairs
            Abundances of each species. Species may be any hashable
            object; order is preserved.
        alpha : float
            Fisher's alpha used to generate the abundances, if any.
        nominal_size : int
            Requested size of the metacommunity. When abundances are drawn
            at random this differs from the actual sum of abundances,
            given by `total_abundance`.
        """
        if isinstance(abundances, collections.abc.Mapping):
            abundances = abundances.items()
        self._abundances = collections.OrderedDict()
        for species, count in abundances:
            if species in self._abundances:
                raise ParameterError("Duplicate species in metacommunity: {}".format(species))
            if count < 0 or int(count) != count:
                raise ParameterError("Abundance of species {} must be a non-negative integer: {}".format(species, count))
            self._abundances[species] = int(count)
        if not self._abundances:
            raise ParameterError("Metacommunity must have at least one species")
        self._species = tuple(self._abundances.keys())
        try:
            self._weights = utility.CumulativeWeights(self._abundances.values())
        except ValueError:
            raise ParameterError("Metacommunity must have at least one individual")
        self.alpha = alpha
        if nominal_size is None:
            self.nominal_size = self._weights.total
        else:
            self.nominal_size = nominal_size

    def __getitem__(self, species):
        return self._abundances[species]

    def __iter__(self):
        return iter(self._abundances)

    def __len__(self):
        return len(self._abundances)

    def __repr__(self):
        return "<Metacommunity: {} species, {} individuals>".format(len(self), self.total_abundance)

    @property
    def species(self):
        return self._species

    @property
    def total_abundance(self):
        return self._weights.total

    def relative_abundance(self, species):
        return float(self._abundances[species]) / self._weights.total

    def draw_species(self, rng):
        """
        Returns a species selected at random with probability proportional
        to its abundance.
        """
        return self._species[self._weights.index_choice(rng)]

    def expected_sample_richness(self, n):
        """
        Expected number of distinct species in a sample of `n` individuals
        drawn independently from this metacommunity, with replacement.
        """
        total = float(self._weights.total)
        richness = 0.0
        for count in self._abundances.values():
            richness += 1.0 - (1.0 - count / total) ** n
        return richness

def build_metacommunity(alpha, size, rng, labeler=None, progress=None):
    """
    Generates a metacommunity of (nominally) `size` individuals with Fisher's
    alpha of `alpha`. The number of species is fixed at its log-series
    expectation, and abundances are drawn independently from the log-series.
    Species are labeled in order of increasing abundance.
    """
    num_species = logseries.expected_species_richness(size=size, alpha=alpha)
    if num_species < 1:
        raise ParameterError("Metacommunity of {} individuals with alpha of {} is expected to have no species".format(size, alpha))
    if labeler is None:
        labeler = SpeciesLabeler()
    sampler = logseries.LogSeriesSampler(rng=rng, progress=progress)
    abundances = sampler.draw(n=num_species, size=size, alpha=alpha)
    labels = labeler.labels(num_species)
    return Metacommunity(
            zip(labels, abundances),
            alpha=alpha,
            nominal_size=size)
