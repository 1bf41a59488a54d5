#! /usr/bin/env python

import math
import random
import unittest
from neutraldrift import community
from neutraldrift import metacommunity
from neutraldrift import logseries
from neutraldrift import utility

class LocalCommunityTestCase(unittest.TestCase):

    def test_views(self):
        c = community.LocalCommunity(["a", "b", "a", "c", "a"])
        self.assertEqual(len(c), 5)
        self.assertEqual(c.richness, 3)
        self.assertEqual(c.species_present, set(["a", "b", "c"]))
        self.assertEqual(c[1], "b")
        self.assertEqual(list(c), ["a", "b", "a", "c", "a"])
        self.assertEqual(c.abundance("a"), 3)
        self.assertEqual(c.abundance("z"), 0)
        self.assertEqual(list(c.abundances().items())[0], ("a", 3))

    def test_replace(self):
        c = community.LocalCommunity(["a", "b", "c"])
        previous = c.replace(1, "a")
        self.assertEqual(previous, "b")
        self.assertEqual(c.individuals, ("a", "a", "c"))
        self.assertEqual(c.richness, 2)
        self.assertNotIn("b", c.abundances())
        c.replace(2, "z")
        self.assertEqual(c.species_present, set(["a", "z"]))
        self.assertEqual(len(c), 3)

    def test_replace_with_same_species(self):
        c = community.LocalCommunity(["a", "b"])
        c.replace(0, "a")
        self.assertEqual(c.abundances(), {"a": 1, "b": 1})

    def test_copy_is_independent(self):
        c1 = community.LocalCommunity(["a", "b"])
        c2 = c1.copy()
        c2.replace(0, "b")
        self.assertEqual(c1.individuals, ("a", "b"))
        self.assertEqual(c2.richness, 1)

    def test_from_abundances(self):
        c = community.LocalCommunity.from_abundances({"a": 2, "b": 0, "c": 1})
        self.assertEqual(c.individuals, ("a", "a", "c"))
        self.assertEqual(c.richness, 2)

    def test_empty(self):
        with self.assertRaises(utility.ParameterError):
            community.LocalCommunity([])

class SampleLocalCommunityTestCase(unittest.TestCase):

    @classmethod
    def setUpClass(cls):
        cls.random_seed = 77
        cls.alpha = 50
        cls.metacommunity_size = 10**9
        # abundances of the right number of species for this size, without
        # paying for the log-series sweep over a large metacommunity
        num_species = logseries.expected_species_richness(size=cls.metacommunity_size, alpha=cls.alpha)
        rng = random.Random(cls.random_seed)
        cls.metacommunity = metacommunity.Metacommunity(
                [("sp{}".format(i), rng.randint(1, 10**7)) for i in range(num_species)],
                alpha=cls.alpha,
                nominal_size=cls.metacommunity_size)

    def test_size_and_richness(self):
        self.assertEqual(len(self.metacommunity), int(math.floor(-50 * math.log(50.0 / (10**9 + 50)))))
        c = community.sample_local_community(self.metacommunity, 256, random.Random(self.random_seed))
        self.assertEqual(len(c), 256)
        self.assertLessEqual(c.richness, 256)
        self.assertLessEqual(c.richness, len(self.metacommunity))
        self.assertTrue(c.species_present.issubset(set(self.metacommunity)))
        for species, count in c.abundances().items():
            self.assertGreater(count, 0)

    def test_from_sampled_metacommunity(self):
        meta = metacommunity.build_metacommunity(alpha=50, size=10**5, rng=random.Random(self.random_seed))
        c = community.sample_local_community(meta, 256, random.Random(self.random_seed))
        self.assertEqual(len(c), 256)
        self.assertLessEqual(c.richness, len(meta))

    def test_species_grouped_in_metacommunity_order(self):
        c = community.sample_local_community(self.metacommunity, 100, random.Random(self.random_seed))
        species_order = list(self.metacommunity.species)
        positions = [species_order.index(s) for s in c]
        self.assertEqual(positions, sorted(positions))

    def test_deterministic(self):
        c1 = community.sample_local_community(self.metacommunity, 256, random.Random(3))
        c2 = community.sample_local_community(self.metacommunity, 256, random.Random(3))
        self.assertEqual(c1.individuals, c2.individuals)

    def test_plain_mapping(self):
        c = community.sample_local_community({"a": 5, "b": 0}, 10, random.Random(3))
        self.assertEqual(c.individuals, ("a",) * 10)

    def test_invalid_size(self):
        rng = random.Random(self.random_seed)
        for local_size in (0, -1, 2.5):
            with self.assertRaises(utility.ParameterError):
                community.sample_local_community(self.metacommunity, local_size, rng)

if __name__ == "__main__":
    unittest.main()
