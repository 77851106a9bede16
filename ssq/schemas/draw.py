"""Schemas for draw history and number generation."""

from __future__ import annotations

from marshmallow import EXCLUDE, Schema, fields, validate


class HistoryQuerySchema(Schema):
    class Meta:
        unknown = EXCLUDE

    limit = fields.Integer(required=False, load_default=100, validate=validate.Range(min=1, max=500))
    offset = fields.Integer(required=False, load_default=0, validate=validate.Range(min=0))


class DrawRecordSchema(Schema):
    """Serialize a stored draw."""

    issue = fields.String(attribute="issue_number")
    draw_date = fields.Date()
    red = fields.List(fields.Integer(), attribute="red_numbers")
    red_order = fields.List(fields.Integer(), attribute="red_numbers_order")
    blue = fields.Integer()
    prize_pool = fields.String(allow_none=True)
    first_prize_count = fields.Integer(allow_none=True)
    first_prize_amount = fields.String(allow_none=True)
    source = fields.String()


class GenerateQuerySchema(Schema):
    class Meta:
        unknown = EXCLUDE

    # Range is enforced by the service so the caller gets a bounds_error.
    count = fields.Integer(required=False, load_default=1)


class CombinationSchema(Schema):
    red = fields.List(fields.Integer(), attribute="reds")
    blue = fields.Integer()
    attempts = fields.Integer()


class GenerateResponseSchema(Schema):
    count = fields.Integer()
    combinations = fields.List(fields.Nested(CombinationSchema))
    attempts_per_combination = fields.List(fields.Integer())


class GeneratedQuerySchema(Schema):
    class Meta:
        unknown = EXCLUDE

    limit = fields.Integer(required=False, load_default=50, validate=validate.Range(min=1, max=200))


class GeneratedCombinationSchema(Schema):
    id = fields.Integer()
    red = fields.List(fields.Integer(), attribute="red_numbers")
    blue = fields.Integer()
    generated_at = fields.DateTime()
