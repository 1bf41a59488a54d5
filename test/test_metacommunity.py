#! /usr/bin/env python

import random
import collections
import unittest
from neutraldrift import logseries
from neutraldrift import metacommunity
from neutraldrift import utility

class SpeciesLabelerTestCase(unittest.TestCase):

    def test_first_labels(self):
        labeler = metacommunity.SpeciesLabeler()
        self.assertEqual(labeler.labels(3), ["AAA", "AAB", "AAC"])
        self.assertEqual(labeler.label(25), "AAZ")
        self.assertEqual(labeler.label(26), "ABA")

    def test_length_grows_when_exhausted(self):
        labeler = metacommunity.SpeciesLabeler()
        self.assertEqual(labeler.label(26**3 - 1), "ZZZ")
        self.assertEqual(labeler.label(26**3), "AAAA")

    def test_unique(self):
        labeler = metacommunity.SpeciesLabeler(alphabet="ab", min_length=2)
        labels = labeler.labels(100)
        self.assertEqual(len(set(labels)), 100)

    def test_invalid_alphabet(self):
        with self.assertRaises(ValueError):
            metacommunity.SpeciesLabeler(alphabet="a")
        with self.assertRaises(ValueError):
            metacommunity.SpeciesLabeler(alphabet="aab")

class MetacommunityTestCase(unittest.TestCase):

    def test_mapping(self):
        meta = metacommunity.Metacommunity([("x", 3), ("y", 1), ("z", 0)])
        self.assertEqual(len(meta), 3)
        self.assertEqual(list(meta), ["x", "y", "z"])
        self.assertEqual(meta["x"], 3)
        self.assertEqual(meta.total_abundance, 4)
        self.assertEqual(meta.nominal_size, 4)
        self.assertAlmostEqual(meta.relative_abundance("x"), 0.75)
        self.assertEqual(dict(meta), {"x": 3, "y": 1, "z": 0})

    def test_immutable(self):
        meta = metacommunity.Metacommunity({"x": 3, "y": 1})
        with self.assertRaises(TypeError):
            meta["x"] = 10
        with self.assertRaises(TypeError):
            del meta["y"]

    def test_invalid(self):
        for abundances in (
                {},
                {"x": 0},
                {"x": -1, "y": 3},
                {"x": 1.5},
                [("x", 1), ("x", 2)],
                ):
            with self.assertRaises(utility.ParameterError):
                metacommunity.Metacommunity(abundances)

    def test_draw_species_proportional(self):
        meta = metacommunity.Metacommunity([("x", 30), ("y", 0), ("z", 10)])
        rng = random.Random(1)
        counts = collections.Counter(meta.draw_species(rng) for i in range(20000))
        self.assertNotIn("y", counts)
        self.assertAlmostEqual(counts["x"] / 20000.0, 0.75, delta=0.02)

    def test_expected_sample_richness(self):
        meta = metacommunity.Metacommunity({"x": 1, "y": 1})
        # 1 - (1/2)^2 for each of two species
        self.assertAlmostEqual(meta.expected_sample_richness(2), 1.5)
        meta = metacommunity.Metacommunity(dict(("s{}".format(i), i+1) for i in range(50)))
        self.assertAlmostEqual(meta.expected_sample_richness(1), 1.0)
        self.assertLess(meta.expected_sample_richness(100), 50)

class BuildMetacommunityTestCase(unittest.TestCase):

    @classmethod
    def setUpClass(cls):
        cls.random_seed = 511

    def test_species_count(self):
        for alpha, size in ((50, 10**5), (5, 1000), (0.5, 10)):
            meta = metacommunity.build_metacommunity(
                    alpha=alpha,
                    size=size,
                    rng=random.Random(self.random_seed))
            self.assertEqual(len(meta), logseries.expected_species_richness(size=size, alpha=alpha))
            self.assertEqual(len(set(meta.species)), len(meta))
            self.assertEqual(meta.alpha, alpha)
            self.assertEqual(meta.nominal_size, size)
            for species in meta:
                self.assertGreaterEqual(meta[species], 1)

    def test_deterministic(self):
        meta1 = metacommunity.build_metacommunity(alpha=20, size=10**4, rng=random.Random(self.random_seed))
        meta2 = metacommunity.build_metacommunity(alpha=20, size=10**4, rng=random.Random(self.random_seed))
        self.assertEqual(dict(meta1), dict(meta2))

    def test_labeled_by_increasing_abundance(self):
        meta = metacommunity.build_metacommunity(alpha=20, size=10**4, rng=random.Random(self.random_seed))
        abundances = [meta[s] for s in meta.species]
        self.assertEqual(abundances, sorted(abundances))
        self.assertEqual(meta.species[0], "AAA")

    def test_invalid(self):
        rng = random.Random(self.random_seed)
        with self.assertRaises(utility.ParameterError):
            metacommunity.build_metacommunity(alpha=0, size=1000, rng=rng)
        with self.assertRaises(utility.ParameterError):
            metacommunity.build_metacommunity(alpha=50, size=0, rng=rng)
        # expected richness rounds down to zero
        with self.assertRaises(utility.ParameterError):
            metacommunity.build_metacommunity(alpha=50, size=1, rng=rng)

if __name__ == "__main__":
    unittest.main()
