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

import sys
import random
import argparse
import neutraldrift
from neutraldrift import utility
from neutraldrift import logseries
from neutraldrift import monitor
from neutraldrift import summarize
from neutraldrift.utility import ParameterError
from neutraldrift.metacommunity import Metacommunity
from neutraldrift.metacommunity import build_metacommunity
from neutraldrift.community import sample_local_community
from neutraldrift.monitor import ReplacementEvent

def check_migration_rate(migration_rate):
    if not (0.0 <= migration_rate <= 1.0):
        raise ParameterError("Migration rate must be in [0, 1]: {}".format(migration_rate))

class DriftMigrationEngine(object):
    """
    Zero-sum birth-death process in a local community of fixed size.

    In each step, one individual, selected uniformly at random, dies. With
    probability `migration_rate` it is replaced by an immigrant drawn from the
    metacommunity in proportion to metacommunity abundances; otherwise it is
    replaced by the offspring of one of the surviving individuals, selected
    uniformly at random.
    """

    def __init__(self,
            community,
            rng,
            migration_rate=0.0,
            metacommunity=None):
        check_migration_rate(migration_rate)
        if migration_rate > 0 and metacommunity is None:
            raise ParameterError("Metacommunity required when migration rate is non-zero: {}".format(migration_rate))
        if metacommunity is not None and not isinstance(metacommunity, Metacommunity):
            metacommunity = Metacommunity(metacommunity)
        self.community = community
        self.rng = rng
        self.migration_rate = migration_rate
        self.metacommunity = metacommunity
        self.current_step = 0
        self.num_immigrations = 0

    def step(self):
        """
        Executes a single death and replacement, returning a
        `ReplacementEvent` describing it.
        """
        position = self.rng.randrange(len(self.community))
        u = self.rng.random()
        if self.migration_rate > 0 and u <= self.migration_rate:
            species = self.metacommunity.draw_species(self.rng)
            is_immigrant = True
            self.num_immigrations += 1
        else:
            species = self._draw_local_recruit(position)
            is_immigrant = False
        previous_species = self.community.replace(position, species)
        self.current_step += 1
        return ReplacementEvent(
                step=self.current_step,
                position=position,
                previous_species=previous_species,
                species=species,
                is_immigrant=is_immigrant)

    def _draw_local_recruit(self, dead_position):
        n = len(self.community)
        if n == 1:
            # no survivors: a community of one can only replace itself
            return self.community[dead_position]
        parent_position = self.rng.randrange(n - 1)
        if parent_position >= dead_position:
            parent_position += 1
        return self.community[parent_position]

    def richness(self):
        return self.community.richness

class RunResult(object):

    def __init__(self,
            mode,
            richness_series,
            community,
            num_steps,
            absorbed,
            stopped=False,
            burn_in=None,
            mean_richness=None,
            event_log=None):
        self.mode = mode
        self.richness_series = richness_series
        self.final_abundances = community.abundances()
        self.num_steps = num_steps
        self.absorbed = absorbed
        self.stopped = stopped
        self.burn_in = burn_in
        self.mean_richness = mean_richness
        self.event_log = event_log

    @property
    def drift_time(self):
        """
        Number of steps taken to reach a monotypic community, or `None` if
        the run ended before then.
        """
        if self.absorbed:
            return self.num_steps
        return None

    @property
    def final_richness(self):
        return len(self.final_abundances)

class RunController(object):
    """
    Drives a `DriftMigrationEngine`, recording species richness after every
    step.
    """

    def __init__(self,
            engine,
            run_logger=None,
            log_frequency=None,
            recording_capacity=None,
            log_replacements=False,
            stop_condition=None,
            debug_mode=False):
        """
        Parameters
        ----------
        engine : `DriftMigrationEngine`
            Process to run.
        run_logger : `utility.RunLogger`
            If given, progress is reported through this.
        log_frequency : int
            Number of steps between progress messages.
        recording_capacity : int
            Maximum number of steps that can be recorded in a single run. If
            `None`, there is no limit.
        log_replacements : bool
            If `True`, every replacement event is recorded in a
            `monitor.ReplacementEventLog` that is returned with the results.
        stop_condition : callable
            If given, called with no arguments before each step; a true
            return value ends the run before that step.
        """
        self.engine = engine
        self.run_logger = run_logger
        self.log_frequency = log_frequency
        self.recording_capacity = recording_capacity
        self.log_replacements = log_replacements
        self.stop_condition = stop_condition
        self.debug_mode = debug_mode

    def _new_records(self):
        series = monitor.RichnessTimeSeries(
                initial_richness=self.engine.richness(),
                capacity=self.recording_capacity)
        if self.log_replacements:
            event_log = monitor.ReplacementEventLog(capacity=self.recording_capacity)
        else:
            event_log = None
        return series, event_log

    def _should_stop(self):
        if self.stop_condition is not None and self.stop_condition():
            if self.run_logger is not None:
                self.run_logger.info("Stop condition met: terminating run")
            return True
        return False

    def _execute_step(self, run_step, series, event_log):
        series.check_capacity(len(series) + 1)
        if event_log is not None:
            event_log.check_capacity(len(event_log) + 1)
        event = self.engine.step()
        richness = self.engine.richness()
        series.append(run_step, richness)
        if event_log is not None:
            event_log.record(event)
        if self.run_logger is not None:
            if self.debug_mode:
                self.run_logger.debug("Position {} ({}) replaced by {} ({}): richness = {}".format(
                    event.position,
                    event.previous_species,
                    event.species,
                    "immigrant" if event.is_immigrant else "local recruit",
                    richness))
            if self.log_frequency and run_step % self.log_frequency == 0:
                self.run_logger.info("Richness: {}".format(richness))
        return richness

    def run_until_absorbed(self, max_steps=None):
        """
        Runs until the community is monotypic, or, if `max_steps` is given,
        until that many steps have been taken.
        """
        if max_steps is not None and max_steps < 0:
            raise ParameterError("Maximum number of steps must not be negative: {}".format(max_steps))
        series, event_log = self._new_records()
        run_step = 0
        stopped = False
        richness = self.engine.richness()
        while richness > 1:
            if max_steps is not None and run_step >= max_steps:
                break
            if self._should_stop():
                stopped = True
                break
            run_step += 1
            richness = self._execute_step(run_step, series, event_log)
        absorbed = richness == 1
        if self.run_logger is not None:
            if absorbed:
                self.run_logger.info("Community monotypic after {} steps".format(run_step))
            elif not stopped:
                self.run_logger.warning("Community not monotypic after maximum of {} steps: richness = {}".format(run_step, richness))
        return RunResult(
                mode="drift",
                richness_series=series,
                community=self.engine.community,
                num_steps=run_step,
                absorbed=absorbed,
                stopped=stopped,
                event_log=event_log)

    def run_fixed_horizon(self, nsteps, burn_in=0):
        """
        Runs for `nsteps` steps, and calculates the mean richness over the
        steps from `burn_in` to the end of the run.
        """
        if nsteps < 0:
            raise ParameterError("Number of steps must not be negative: {}".format(nsteps))
        if burn_in < 0:
            raise ParameterError("Burn-in must not be negative: {}".format(burn_in))
        series, event_log = self._new_records()
        series.check_capacity(nsteps)
        run_step = 0
        stopped = False
        while run_step < nsteps:
            if self._should_stop():
                stopped = True
                break
            run_step += 1
            self._execute_step(run_step, series, event_log)
        mean_richness = series.mean_richness(start_step=burn_in)
        if self.run_logger is not None:
            if mean_richness is None:
                self.run_logger.warning("No steps recorded after burn-in of {} steps (run length: {})".format(burn_in, run_step))
            else:
                self.run_logger.info("Mean richness after burn-in of {} steps: {}".format(burn_in, mean_richness))
        return RunResult(
                mode="fixed",
                richness_series=series,
                community=self.engine.community,
                num_steps=run_step,
                absorbed=self.engine.richness() == 1,
                stopped=stopped,
                burn_in=burn_in,
                mean_richness=mean_richness,
                event_log=event_log)

class NeutralSimulator(object):

    @staticmethod
    def simulation_model_arg_parser():
        parser = argparse.ArgumentParser(add_help=False)
        model_metacommunity_options = parser.add_argument_group("MODEL: Metacommunity Configuration")
        model_metacommunity_options.add_argument("-a", "--alpha",
                type=float,
                default=50.0,
                help="Fisher's alpha of the metacommunity (default = %(default)s).")
        model_metacommunity_options.add_argument("-J", "--metacommunity-size",
                type=int,
                default=1000000,
                help="Number of individuals in the metacommunity (default = %(default)s).")
        model_local_options = parser.add_argument_group("MODEL: Local Community Configuration")
        model_local_options.add_argument("-N", "--local-size",
                type=int,
                default=256,
                help="Number of individuals in the local community (default = %(default)s).")
        model_local_options.add_argument("-m", "--migration-rate",
                type=float,
                default=0.01,
                help="Probability that a dead individual is replaced by an immigrant from the metacommunity (default = %(default)s).")
        return parser

    def __init__(self, **kwargs):
        self.engine = None
        self.configure_simulator(kwargs)
        self.set_model(kwargs)
        if kwargs:
            raise TypeError("Unsupported configuration keywords: {}".format(kwargs))
        self.bootstrap()

    def configure_simulator(self, configd):

        self.output_prefix = configd.pop("output_prefix", "neutraldrift")

        self.run_logger = configd.pop("run_logger", None)
        if self.run_logger is None:
            self.run_logger = utility.RunLogger(name="neutraldrift",
                    log_path=self.output_prefix + ".log")
        self.run_logger.system = self

        self.debug_mode = configd.pop("debug_mode", False)
        if self.debug_mode:
            self.run_logger.info("Running in DEBUG mode")

        self.name = configd.pop("name", None)
        if self.name is None:
            self.name = str(id(self))
        self.run_logger.info("Configuring simulation '{}'".format(self.name))

        self.rng = configd.pop("rng", None)
        if self.rng is None:
            self.random_seed = configd.pop("random_seed", None)
            if self.random_seed is None:
                self.random_seed = random.randint(0, sys.maxsize)
            self.run_logger.info("Initializing with random seed {}".format(self.random_seed))
            self.rng = random.Random(self.random_seed)
        else:
            if "random_seed" in configd:
                raise TypeError("Cannot specify both 'rng' and 'random_seed'")
            self.random_seed = None
            self.run_logger.info("Using existing random number generator")

        self.log_frequency = configd.pop("log_frequency", 1000)
        self.progress_frequency = configd.pop("progress_frequency", 100)
        self.recording_capacity = configd.pop("recording_capacity", None)
        self.log_replacements = configd.pop("log_replacements", False)

    def set_model(self, model_params_d):

        # Metacommunity
        self.metacommunity = model_params_d.pop("metacommunity", None)
        if self.metacommunity is None:
            self.alpha = model_params_d.pop("alpha", 50.0)
            self.metacommunity_size = model_params_d.pop("metacommunity_size", 1000000)
        else:
            if not isinstance(self.metacommunity, Metacommunity):
                self.metacommunity = Metacommunity(self.metacommunity)
            for key in ("alpha", "metacommunity_size"):
                if key in model_params_d:
                    raise TypeError("Cannot specify both 'metacommunity' and '{}'".format(key))
            self.alpha = self.metacommunity.alpha
            self.metacommunity_size = self.metacommunity.nominal_size
            self.run_logger.info("Using existing metacommunity of {} species".format(len(self.metacommunity)))
        if self.alpha is not None and self.alpha <= 0:
            raise ParameterError("Fisher's alpha must be positive: {}".format(self.alpha))
        if self.metacommunity_size <= 0:
            raise ParameterError("Metacommunity size must be positive: {}".format(self.metacommunity_size))
        if self.metacommunity is None:
            logseries.check_logseries_parameters(size=self.metacommunity_size, alpha=self.alpha)
        self.run_logger.info("Metacommunity, alpha: {}".format(self.alpha))
        self.run_logger.info("Metacommunity, size: {}".format(self.metacommunity_size))

        # Local community
        self.local_size = model_params_d.pop("local_size", 256)
        if self.local_size <= 0:
            raise ParameterError("Local community size must be positive: {}".format(self.local_size))
        self.run_logger.info("Local community, size: {}".format(self.local_size))
        self.migration_rate = model_params_d.pop("migration_rate", 0.01)
        check_migration_rate(self.migration_rate)
        self.run_logger.info("Migration rate, m: {}".format(self.migration_rate))

    def bootstrap(self):
        if self.metacommunity is None:
            self.run_logger.info("Generating metacommunity")
            self.metacommunity = build_metacommunity(
                    alpha=self.alpha,
                    size=self.metacommunity_size,
                    rng=self.rng,
                    progress=self._report_sampling_progress)
        self.run_logger.info("Metacommunity: {} species, {} individuals".format(
            len(self.metacommunity), self.metacommunity.total_abundance))
        self.initial_community = sample_local_community(
                metacommunity=self.metacommunity,
                local_size=self.local_size,
                rng=self.rng)
        self.run_logger.info("Local community: {} species, {} individuals".format(
            self.initial_community.richness, len(self.initial_community)))

    def _report_sampling_progress(self, num_completed, num_requested):
        if ( (self.progress_frequency and num_completed % self.progress_frequency == 0)
                or num_completed == num_requested ):
            self.run_logger.info("Drawn abundances for {} of {} species".format(num_completed, num_requested))

    @property
    def current_step(self):
        if self.engine is None:
            return 0
        return self.engine.current_step

    def new_controller(self, migration_rate, stop_condition=None):
        """
        Returns a `RunController` for a new engine that acts on a copy of the
        initial local community.
        """
        self.engine = DriftMigrationEngine(
                community=self.initial_community.copy(),
                rng=self.rng,
                migration_rate=migration_rate,
                metacommunity=self.metacommunity)
        return RunController(
                engine=self.engine,
                run_logger=self.run_logger,
                log_frequency=self.log_frequency,
                recording_capacity=self.recording_capacity,
                log_replacements=self.log_replacements,
                stop_condition=stop_condition,
                debug_mode=self.debug_mode)

    def run_drift(self, max_steps=None, stop_condition=None):
        self.run_logger.info("Running pure drift until community is monotypic")
        controller = self.new_controller(migration_rate=0.0, stop_condition=stop_condition)
        return controller.run_until_absorbed(max_steps=max_steps)

    def run_migration(self, nsteps, burn_in=0, stop_condition=None):
        self.run_logger.info("Running drift with migration rate of {} for {} steps".format(self.migration_rate, nsteps))
        controller = self.new_controller(migration_rate=self.migration_rate, stop_condition=stop_condition)
        return controller.run_fixed_horizon(nsteps=nsteps, burn_in=burn_in)

    def run_paired_experiment(self, burn_in, max_drift_steps=None, stop_condition=None):
        """
        Runs pure drift from the initial local community until it is
        monotypic, and then drift with migration from the same initial
        community for the same number of steps.
        """
        drift_result = self.run_drift(max_steps=max_drift_steps, stop_condition=stop_condition)
        migration_result = self.run_migration(
                nsteps=drift_result.num_steps,
                burn_in=burn_in,
                stop_condition=stop_condition)
        return drift_result, migration_result

def _make_run_logger(output_prefix, stderr_logging_level, file_logging_level):
    if stderr_logging_level is None or stderr_logging_level.lower() == "none":
        log_to_stderr = False
    else:
        log_to_stderr = True
    if file_logging_level is None or file_logging_level.lower() == "none":
        log_to_file = False
    else:
        log_to_file = True
    return utility.RunLogger(
            name="neutraldrift",
            log_path=output_prefix + ".log",
            log_to_stderr=log_to_stderr,
            stderr_logging_level=stderr_logging_level,
            log_to_file=log_to_file,
            file_logging_level=file_logging_level,
            )

def repeat_run_neutral(
        model_params_d,
        nreps,
        output_prefix,
        burn_in=10000,
        max_drift_steps=None,
        random_seed=None,
        stderr_logging_level="info",
        file_logging_level="debug",
        run_logger=None,
        **kwargs):
    """
    Executes multiple paired runs (pure drift, followed by drift with
    migration for the same number of steps) under identical parameters.

    Parameters
    ----------
    model_params_d : dict
        Simulator model parameters as keyword-value pairs. To be re-used for
        each replicate. A single metacommunity is generated and shared by all
        replicates, unless one is given in this dictionary.
    nreps : integer
        Number of replicates to produce.
    output_prefix : string
        Path prefix for output files.
    burn_in : integer
        Number of initial steps of the migration run to exclude from the
        calculation of mean richness.
    max_drift_steps : integer or None
        Maximum number of steps of the pure drift run.
    random_seed : integer
        Random seed to be used to seed each replicate.
    stderr_logging_level : string or None
        Message level threshold for screen logs; if 'none' or `None`, screen
        logs will be suppressed.
    file_logging_level : string or None
        Message level threshold for file logs; if 'none' or `None`, file
        logs will be suppressed.
    run_logger : `utility.RunLogger`
        Logger to use instead of one constructed from the logging levels.
    **kwargs
        Other simulator configuration keywords (e.g., `log_frequency`,
        `recording_capacity`, `log_replacements`).

    Returns
    -------
    summaries : list of dict
        Summary statistics of each replicate.
    """
    configd = dict(model_params_d)
    configd.update(kwargs)
    if run_logger is None:
        run_logger = _make_run_logger(output_prefix, stderr_logging_level, file_logging_level)
    configd["run_logger"] = run_logger
    run_logger.info("Starting: {}".format(neutraldrift.description()))
    if random_seed is None:
        random_seed = random.randint(0, sys.maxsize)
    run_logger.info("Initializing with random seed: {}".format(random_seed))
    master_rng = random.Random(random_seed)
    if "metacommunity" not in configd:
        alpha = configd.pop("alpha", 50.0)
        metacommunity_size = configd.pop("metacommunity_size", 1000000)
        run_logger.info("Generating metacommunity shared by all replicates: alpha = {}, size = {}".format(alpha, metacommunity_size))
        configd["metacommunity"] = build_metacommunity(
                alpha=alpha,
                size=metacommunity_size,
                rng=master_rng)
    summaries = []
    with open(output_prefix + ".summary.tsv", "w") as summary_out:
        summary_writer = summarize.SummaryStatsWriter(summary_out)
        for rep in range(nreps):
            simulation_name = "Run{}".format(rep+1)
            run_output_prefix = "{}.R{:04d}".format(output_prefix, rep+1)
            run_logger.info("Run {} of {}: starting".format(rep+1, nreps))
            simulator = NeutralSimulator(
                    name=simulation_name,
                    random_seed=master_rng.randint(0, sys.maxsize),
                    **configd)
            drift_result, migration_result = simulator.run_paired_experiment(
                    burn_in=burn_in,
                    max_drift_steps=max_drift_steps)
            run_logger.system = None
            if drift_result.absorbed:
                run_logger.info("Run {} of {}: monotypic after {} steps; mean richness with migration: {}".format(
                    rep+1, nreps, drift_result.drift_time, migration_result.mean_richness))
            else:
                run_logger.warning("Run {} of {}: not monotypic after {} steps".format(
                    rep+1, nreps, drift_result.num_steps))
            summarize.write_run_outputs(run_output_prefix, drift_result, migration_result)
            summary = summarize.summarize_replicate(simulator, drift_result, migration_result)
            summary_writer.write(summary)
            summaries.append(summary)
    return summaries
