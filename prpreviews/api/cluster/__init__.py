"""Cluster connectivity endpoint."""
