#! /usr/bin/env python

import collections
import pandas
from neutraldrift.utility import ParameterError
from neutraldrift.utility import CapacityError

ReplacementEvent = collections.namedtuple("ReplacementEvent", [
    "step",
    "position",
    "previous_species",
    "species",
    "is_immigrant",
    ])

def _check_capacity(capacity):
    if capacity is not None and (capacity <= 0 or int(capacity) != capacity):
        raise ParameterError("Recording capacity must be a positive integer or None: {}".format(capacity))

class RichnessTimeSeries(object):
    """
    Species richness of a community after each step of a run.

    If `capacity` is `None` the series grows as needed; otherwise, recording
    more than `capacity` entries raises a `CapacityError`.
    """

    def __init__(self, initial_richness=None, capacity=None):
        _check_capacity(capacity)
        self.initial_richness = initial_richness
        self.capacity = capacity
        self.steps = []
        self.richness = []

    def __len__(self):
        return len(self.steps)

    def __iter__(self):
        return zip(self.steps, self.richness)

    def __getitem__(self, idx):
        return (self.steps[idx], self.richness[idx])

    def check_capacity(self, num_entries):
        if self.capacity is not None and num_entries > self.capacity:
            raise CapacityError("Cannot record {} entries: capacity is {}".format(num_entries, self.capacity))

    def append(self, step, richness):
        self.check_capacity(len(self.steps) + 1)
        self.steps.append(step)
        self.richness.append(richness)

    @property
    def final_richness(self):
        if self.richness:
            return self.richness[-1]
        return self.initial_richness

    def first_step_with_richness(self, richness):
        for step, r in zip(self.steps, self.richness):
            if r == richness:
                return step
        return None

    def mean_richness(self, start_step=0, end_step=None):
        """
        Mean richness over all entries with steps in the closed interval
        [`start_step`, `end_step`], or `None` if there are no such entries.
        """
        total = 0
        count = 0
        for step, r in zip(self.steps, self.richness):
            if step < start_step:
                continue
            if end_step is not None and step > end_step:
                break
            total += r
            count += 1
        if count == 0:
            return None
        return float(total) / count

    def as_data_frame(self):
        return pandas.DataFrame({
            "step": self.steps,
            "richness": self.richness,
            }, columns=["step", "richness"])

class ReplacementEventLog(object):
    """
    Record of which position of a community was replaced at each step, and
    with what, in sufficient detail to replay the run.
    """

    def __init__(self, capacity=None):
        _check_capacity(capacity)
        self.capacity = capacity
        self.events = []

    def __len__(self):
        return len(self.events)

    def __iter__(self):
        return iter(self.events)

    def check_capacity(self, num_events):
        if self.capacity is not None and num_events > self.capacity:
            raise CapacityError("Cannot record {} replacement events: capacity is {}".format(num_events, self.capacity))

    def record(self, event):
        self.check_capacity(len(self.events) + 1)
        self.events.append(event)

    def changed_positions(self):
        return [(event.step, event.position) for event in self.events]

    def as_data_frame(self):
        return pandas.DataFrame(self.events, columns=list(ReplacementEvent._fields))
