"""
Core business logic for polar performance.

This module is framework-agnostic - it doesn't import FastAPI, httpx,
or any infrastructure concerns, so the polar math can be tested in
isolation.
"""
