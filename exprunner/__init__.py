"""Load-test and root-cause-analysis experiment runners, with Chaos Mesh delay injection."""

__version__ = "0.1.0"