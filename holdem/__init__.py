"""
Holdem Arena: Texas Hold'em engine with pluggable AI strategies

A no-limit hold'em betting state machine, a five-card-category hand
evaluator, and eighteen interchangeable decision strategies ranging from
tree search and Monte Carlo rollouts to Bayesian opponent modeling,
Kelly-criterion sizing and table-driven heuristics.
"""

__version__ = "0.1.0"
