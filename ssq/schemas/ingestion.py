"""Ingestion report schema."""

from __future__ import annotations

from marshmallow import Schema, fields


class IngestionSummarySchema(Schema):
    total_parsed = fields.Integer()
    new_records = fields.Integer()
    skipped_existing = fields.Integer()
    replaced_synthetic = fields.Integer()
    conflicts = fields.Integer()
    failures = fields.Integer()
    synthetic = fields.Boolean()
    source = fields.String(allow_none=True)
    latest_issue = fields.String(allow_none=True)
