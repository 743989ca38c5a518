"""
Request payload schemas. load() turns marshmallow's errors into the
application's ValidationError so callers only deal with one error type.
"""
from marshmallow import EXCLUDE, Schema, fields, pre_load, validate
from marshmallow import ValidationError as SchemaError

from core.errors import ValidationError


class _Stripped(Schema):
    """Trims string input and treats blank optional strings as missing."""

    class Meta:
        unknown = EXCLUDE

    @pre_load
    def strip_strings(self, data, **kwargs):
        if not isinstance(data, dict):
            return data
        cleaned = {}
        for key, value in data.items():
            if isinstance(value, str):
                value = value.strip()
            cleaned[key] = value
        return cleaned


class BlogFormSchema(_Stripped):
    title = fields.Str(required=True, validate=validate.Length(min=1, max=200, error="Title is required"))
    content = fields.Str(load_default='')
    excerpt = fields.Str(load_default='', validate=validate.Length(
        max=200, error="Excerpt must be less than 200 characters"))
    category_id = fields.Str(required=True, validate=validate.Length(min=1, error="Category is required"))
    featured_image = fields.Url(allow_none=True, load_default=None, error_messages={
        'invalid': "Must be a valid URL"})

    @pre_load
    def blank_image_is_none(self, data, **kwargs):
        if isinstance(data, dict) and data.get('featured_image') == '':
            data = dict(data, featured_image=None)
        return data


class CommentCreateSchema(_Stripped):
    # Emptiness is checked by the comment service so the message is the same
    # whether the field is missing or only whitespace.
    content = fields.Str(load_default='')
    parent_id = fields.Str(allow_none=True, load_default=None)


class ModerationSchema(_Stripped):
    feedback = fields.Str(load_default='', validate=validate.Length(max=2000))


class FeatureSchema(_Stripped):
    featured = fields.Bool(load_default=True)


class CategoryCreateSchema(_Stripped):
    name = fields.Str(required=True, validate=validate.Length(min=1, max=50))
    description = fields.Str(load_default='', validate=validate.Length(max=500))


class ProfileUpdateSchema(_Stripped):
    full_name = fields.Str(allow_none=True, validate=validate.Length(max=100))
    avatar_url = fields.Url(allow_none=True)
    bio = fields.Str(validate=validate.Length(max=500))


class ExcerptRequestSchema(_Stripped):
    content = fields.Str(required=True, validate=validate.Length(min=1))


def load(schema, data):
    try:
        return schema.load(data or {})
    except SchemaError as err:
        raise ValidationError("Invalid input", details=err.messages) from err
