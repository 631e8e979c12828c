from rest_framework import serializers
from rest_framework.exceptions import ParseError


class ListFilterSerializer(serializers.Serializer):
    """Numeric query-string filters shared by the list endpoints."""

    employee = serializers.IntegerField(required=False, min_value=1)
    department = serializers.IntegerField(required=False, min_value=1)
    cycle = serializers.IntegerField(required=False, min_value=1)
    month = serializers.IntegerField(required=False, min_value=1, max_value=12)
    year = serializers.IntegerField(required=False, min_value=1900, max_value=9999)


def parse_filters(query_params):
    """
    Returns the validated numeric filters present in `query_params`.
    Blank values count as absent; anything else unparseable is a 400.
    """
    data = {k: v for k, v in query_params.items() if v != ''}
    serializer = ListFilterSerializer(data=data)
    if not serializer.is_valid():
        name, errors = next(iter(serializer.errors.items()))
        raise ParseError(f"Invalid '{name}' parameter: {errors[0]}")
    return serializer.validated_data
