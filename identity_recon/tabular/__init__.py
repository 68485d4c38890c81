"""Tabular input/output: header detection, file reading and result export."""
