"""Rate gating adapters.

This package provides a small abstraction layer so the transport can start
with an in-process minimum-interval gate and later move to a shared store
without changing request handling.
"""
