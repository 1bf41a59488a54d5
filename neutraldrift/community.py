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

import collections
from neutraldrift.utility import ParameterError
from neutraldrift.metacommunity import Metacommunity

class LocalCommunity(object):
    """
    A fixed number of individuals, each identified only by its species.

    Individuals are held in a sequence, so that each occupies a position that
    persists across replacements (useful for, e.g., animating the community
    spatially). Abundances are tracked alongside, so that richness is
    available at any time without a pass over the community.
    """

    def __init__(self, individuals):
        self._individuals = list(individuals)
        if not self._individuals:
            raise ParameterError("Local community must have at least one individual")
        self._counts = collections.Counter(self._individuals)

    @classmethod
    def from_abundances(cls, abundances):
        individuals = []
        for species, count in abundances.items():
            individuals.extend([species] * count)
        return cls(individuals)

    def __len__(self):
        return len(self._individuals)

    def __getitem__(self, index):
        return self._individuals[index]

    def __iter__(self):
        return iter(self._individuals)

    def __repr__(self):
        return "<LocalCommunity: {} species, {} individuals>".format(self.richness, len(self))

    def replace(self, index, species):
        """
        Replaces the individual at position `index` with one of `species`,
        returning the species of the individual replaced.
        """
        previous = self._individuals[index]
        self._individuals[index] = species
        self._counts[species] += 1
        self._counts[previous] -= 1
        if self._counts[previous] == 0:
            del self._counts[previous]
        return previous

    @property
    def richness(self):
        return len(self._counts)

    @property
    def species_present(self):
        return set(self._counts)

    @property
    def individuals(self):
        return tuple(self._individuals)

    def abundance(self, species):
        return self._counts.get(species, 0)

    def abundances(self):
        """
        Returns a dictionary of species to abundances, with species ordered
        from most to least abundant. Absent species are not included.
        """
        return collections.OrderedDict(self._counts.most_common())

    def copy(self):
        return self.__class__(self._individuals)

def sample_local_community(metacommunity, local_size, rng):
    """
    Populates a local community of `local_size` individuals, each drawn
    independently from `metacommunity` with probability proportional to
    abundance (i.e., the species abundances are a multinomial sample). The
    individuals of each species occupy consecutive positions, with species
    in metacommunity order.
    """
    if not isinstance(metacommunity, Metacommunity):
        metacommunity = Metacommunity(metacommunity)
    if local_size <= 0 or int(local_size) != local_size:
        raise ParameterError("Local community size must be a positive integer: {}".format(local_size))
    counts = collections.Counter(metacommunity.draw_species(rng) for i in range(int(local_size)))
    individuals = []
    for species in metacommunity.species:
        if counts[species] > 0:
            individuals.extend([species] * counts[species])
    return LocalCommunity(individuals)
