#! /usr/bin/env python

import io
import random
import logging
import unittest
from neutraldrift import utility

class CumulativeWeightsTestCase(unittest.TestCase):

    def test_zero_weights_never_chosen(self):
        weights = utility.CumulativeWeights([0, 3, 0, 1, 0])
        rng = random.Random(8)
        chosen = set(weights.index_choice(rng) for i in range(2000))
        self.assertEqual(chosen, set([1, 3]))

    def test_float_weights(self):
        weights = utility.CumulativeWeights([0.5, 0.25, 0.25])
        self.assertAlmostEqual(weights.total, 1.0)
        rng = random.Random(8)
        counts = [0, 0, 0]
        for i in range(20000):
            counts[weights.index_choice(rng)] += 1
        self.assertAlmostEqual(counts[0] / 20000.0, 0.5, delta=0.02)

    def test_invalid(self):
        with self.assertRaises(ValueError):
            utility.CumulativeWeights([])
        with self.assertRaises(ValueError):
            utility.CumulativeWeights([0, 0])
        with self.assertRaises(ValueError):
            utility.CumulativeWeights([1, -1, 3])

class ErrorTypesTestCase(unittest.TestCase):

    def test_hierarchy(self):
        self.assertTrue(issubclass(utility.ParameterError, ValueError))
        self.assertTrue(issubclass(utility.NumericRangeError, OverflowError))
        self.assertTrue(issubclass(utility.CapacityError, IndexError))
        for error_type in (utility.ParameterError, utility.NumericRangeError, utility.CapacityError):
            self.assertTrue(issubclass(error_type, utility.NeutralDriftError))

class RunLoggerTestCase(unittest.TestCase):

    class DummySystem(object):
        current_step = 17

    def test_levels(self):
        logger = utility.RunLogger(name="neutraldrift-test-levels", log_to_stderr=False, log_to_file=False)
        self.assertEqual(logger.get_logging_level("debug"), logging.DEBUG)
        self.assertEqual(logger.get_logging_level("Warning"), logging.WARNING)
        self.assertEqual(logger.get_logging_level(logging.ERROR), logging.ERROR)
        self.assertEqual(logger.get_logging_level("bogus"), logging.NOTSET)

    def test_step_prefix(self):
        stream = io.StringIO()
        logger = utility.RunLogger(
                name="neutraldrift-test-stream",
                log_to_stderr=False,
                log_to_file=True,
                log_stream=stream,
                file_logging_level="info")
        logger.debug("hidden")
        logger.info("before")
        logger.system = self.DummySystem()
        logger.info("richness %s", 3)
        logger.system = None
        logger.close()
        lines = stream.getvalue().strip().split("\n")
        self.assertEqual(len(lines), 2)
        self.assertTrue(lines[0].endswith("] before"))
        self.assertTrue(lines[1].endswith("Step 17: richness 3"))

    def test_default_formatter_restored(self):
        stream = io.StringIO()
        logger = utility.RunLogger(
                name="neutraldrift-test-restore",
                log_to_stderr=False,
                log_to_file=True,
                log_stream=stream,
                file_logging_level="warning")
        logger.system = self.DummySystem()
        logger.system = None
        logger.info("hidden")
        logger.warning("after detach")
        logger.close()
        lines = stream.getvalue().strip().split("\n")
        self.assertEqual(len(lines), 1)
        self.assertTrue(lines[0].endswith("] after detach"))
        self.assertNotIn("Step", lines[0])

if __name__ == "__main__":
    unittest.main()
