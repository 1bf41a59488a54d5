#! /usr/bin/env python

import collections
import pandas

def abundance_table(abundances):
    """
    Returns a data frame of species and their abundances, ordered from most
    to least abundant. `abundances` may be a `community.LocalCommunity`, or
    any mapping of species to abundances. Species with an abundance of 0 are
    excluded.
    """
    if hasattr(abundances, "abundances"):
        abundances = abundances.abundances()
    rows = [(species, count) for species, count in abundances.items() if count > 0]
    rows.sort(key=lambda row: (-row[1], str(row[0])))
    return pandas.DataFrame(rows, columns=["species", "abundance"])

def write_abundances(abundances, path):
    abundance_table(abundances).to_csv(path, sep="\t", index=False)

def write_richness_series(richness_series, path):
    richness_series.as_data_frame().to_csv(path, sep="\t", index=False)

def write_replacement_events(event_log, path):
    event_log.as_data_frame().to_csv(path, sep="\t", index=False)

def write_run_outputs(output_prefix, drift_result, migration_result):
    for result, label in (
            (drift_result, "drift"),
            (migration_result, "migration"),
            ):
        write_richness_series(result.richness_series,
                "{}.{}.richness.tsv".format(output_prefix, label))
        write_abundances(result.final_abundances,
                "{}.{}.abundances.tsv".format(output_prefix, label))
        if result.event_log is not None:
            write_replacement_events(result.event_log,
                    "{}.{}.events.tsv".format(output_prefix, label))

def summarize_replicate(simulator, drift_result, migration_result):
    stat_values = collections.OrderedDict()
    stat_values["name"] = simulator.name
    stat_values["random.seed"] = simulator.random_seed
    stat_values["alpha"] = simulator.alpha
    stat_values["metacommunity.size"] = simulator.metacommunity_size
    stat_values["metacommunity.richness"] = len(simulator.metacommunity)
    stat_values["local.size"] = simulator.local_size
    stat_values["migration.rate"] = simulator.migration_rate
    stat_values["initial.richness"] = simulator.initial_community.richness
    stat_values["drift.absorbed"] = drift_result.absorbed
    stat_values["drift.time"] = drift_result.drift_time
    stat_values["migration.steps"] = migration_result.num_steps
    stat_values["migration.burn.in"] = migration_result.burn_in
    stat_values["migration.mean.richness"] = migration_result.mean_richness
    stat_values["migration.final.richness"] = migration_result.final_richness
    return stat_values

class SummaryStatsWriter(object):
    """
    Writes summary records to a tab-delimited stream, one row per record,
    with a header row derived from the first record written.
    """

    def __init__(self, out, missing_value="NA"):
        self.out = out
        self.missing_value = missing_value
        self.fields = None

    def write_header(self, fields):
        self.fields = list(fields)
        self.out.write("{}\n".format("\t".join(self.fields)))
        self.out.flush()

    def write(self, stat_values):
        if self.fields is None:
            self.write_header(stat_values.keys())
        values = []
        for field in self.fields:
            value = stat_values.get(field, None)
            if value is None:
                values.append(self.missing_value)
            else:
                values.append(str(value))
        self.out.write("\t".join(values))
        self.out.write("\n")
        self.out.flush()
