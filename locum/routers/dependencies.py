"""Caller identity, as forwarded by the upstream identity provider."""

from fastapi import Header


def get_physician_id(
    x_physician_id: str = Header(..., alias="X-Physician-Id", min_length=1),
) -> str:
    return x_physician_id


def get_facility_id(
    x_facility_id: str = Header(..., alias="X-Facility-Id", min_length=1),
) -> str:
    return x_facility_id
