"""
Infrastructure layer - external service integrations.

- orc: ORC DownBoatRMS API client (plus an in-memory mock)

These wrappers fetch raw data; translating it into domain models is
left to core.
"""
