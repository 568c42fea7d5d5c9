"""
Visualisation tool for the daily compartment counts
"""
import argparse
import logging
import sys

import pandas as pd  # type: ignore
from matplotlib import pyplot as plt
from matplotlib.colors import ListedColormap

from epidemic_sim.simulation import SUMMARY_COLUMNS

COMPARTMENTS = SUMMARY_COLUMNS[1:]


def plot_compartments(df, compartments=None, figsize=(12, 6), cmap=None):
    """
    Plots one line per compartment, Number of People x Day

    :param df: pandas DataFrame as returned by the simulation, with a day column and one column per compartment
    :type df: pandas DataFrame
    :param compartments: plots one curve per compartment listed (None means all compartments)
    :type compartments: list (of compartment labels).
    :param figsize: size of the figure
    :type figsize: tuple
    :param cmap: color map to use
    :type cmap:
    :return: returns a matplotlib figure
    :rtype: matplotlib figure
    """
    if compartments is None:
        compartments = COMPARTMENTS
    if cmap is None:
        cmap = ListedColormap(["#56B4E9", "#009E73", "#F0E442", "#0072B2", "#D55E00", "#CC79A7", "#999999"])

    if not compartments:
        raise ValueError("compartments cannot be an empty list")
    if "day" not in df.columns:
        raise ValueError("day column missing")
    unknown = set(compartments) - set(df.columns)
    if unknown:
        raise ValueError(f"unknown compartments: {sorted(unknown)}")

    fig, ax = plt.subplots(constrained_layout=True, figsize=figsize)
    df.set_index("day")[list(compartments)].plot(ax=ax, cmap=cmap)
    ax.set_ylabel("Number of People")
    ax.set_xlabel("Day")

    return fig


def build_args(argv):
    parser = argparse.ArgumentParser(
        formatter_class=argparse.ArgumentDefaultsHelpFormatter,
        description="Reads the CSV output of a run and plots it",
    )
    parser.add_argument(
        "--compartments",
        default=None,
        metavar="compartment,[compartment,...]",
        help="Comma-separated list of compartments to plot. All compartments will be plotted if not provided."
    )
    parser.add_argument("--output", default=None, help="Save the figure to this file instead of showing it")
    parser.add_argument("csv_path", type=str, help="Path to the CSV written by epidemic_sim.run_model --output")

    return parser.parse_args(argv)


def main(argv):
    """
    This is the main function of the visualisation tool. The tool outputs a graph for a given run
    """
    logging.basicConfig(
        stream=sys.stdout,
        level=logging.INFO,
        format="[%(asctime)s] [%(name)s] [%(levelname)s] %(message)s",
    )
    args = build_args(argv)
    fig = plot_compartments(
        pd.read_csv(args.csv_path),
        args.compartments.split(",") if args.compartments else None,
    )
    if args.output:
        fig.savefig(args.output)
    else:
        plt.show()


if __name__ == "__main__":
    main(sys.argv[1:])
