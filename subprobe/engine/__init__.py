"""Scanning engine: probes, validation chain, wildcard filter and worker pool."""
