import re
from decimal import Decimal, InvalidOperation

from rest_framework import serializers

# 1.234,56 / 1234,56 / -12,5
BR_DECIMAL_RE = re.compile(r'^-?\d{1,3}(\.\d{3})*(,\d+)?$|^-?\d+(,\d+)?$')


def parse_localized_decimal(value):
    """
    Parse a number typed into a form.

    Accepts real numbers, plain decimal strings ('1234.56') and Brazilian
    notation ('1.234,56', '10,5'). Raises ValueError for anything else
    instead of falling back to zero.
    """
    if isinstance(value, bool):
        raise ValueError('Booleans are not numbers.')
    if isinstance(value, (int, Decimal)):
        return Decimal(value)
    if isinstance(value, float):
        return Decimal(str(value))
    if not isinstance(value, str):
        raise ValueError(f'Unsupported value: {value!r}')

    text = value.strip().replace(' ', '')
    if not text:
        raise ValueError('Empty value.')
    if ',' in text:
        if not BR_DECIMAL_RE.match(text):
            raise ValueError(f'Malformed number: {value!r}')
        text = text.replace('.', '').replace(',', '.')
    try:
        number = Decimal(text)
    except InvalidOperation:
        raise ValueError(f'Malformed number: {value!r}')
    if not number.is_finite():
        raise ValueError(f'Malformed number: {value!r}')
    return number


class LocalizedDecimalField(serializers.DecimalField):
    """DecimalField that also understands comma decimal separators"""

    def to_internal_value(self, data):
        try:
            data = parse_localized_decimal(data)
        except ValueError:
            self.fail('invalid')
        return super().to_internal_value(data)
