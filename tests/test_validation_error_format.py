from core.validation_errors import format_validation_error_details


def test_missing_required_field_summary_is_readable():
    errors = [
        {
            "type": "missing",
            "loc": ("body", "factors", "severity"),
            "msg": "Field required",
            "input": {
                "property_type": "single_family",
                "square_footage": 2000,
                "pest_type": "general",
                "frequency": "quarterly",
            },
        }
    ]

    details = format_validation_error_details(errors)

    assert details["summary"] == "Validation failed: missing required field: factors.severity."
    assert details["missingFields"] == ["factors.severity"]
    assert details["fieldErrors"] == [
        {
            "path": "factors.severity",
            "location": "body",
            "message": "Field required",
            "errorType": "missing",
        }
    ]
    assert details["errors"] == errors


def test_invalid_enum_value_has_field_error_without_missing_summary():
    errors = [
        {
            "type": "enum",
            "loc": ("body", "factors", "pest_type"),
            "msg": "Input should be 'general', 'ants' or 'roaches'",
            "input": "dragons",
        }
    ]

    details = format_validation_error_details(errors)

    assert details["summary"] == "Validation failed for 1 field."
    assert details["missingFields"] == []
    assert details["fieldErrors"][0]["path"] == "factors.pest_type"
    assert details["fieldErrors"][0]["errorType"] == "enum"


def test_multiple_missing_fields_are_deduplicated_and_listed():
    errors = [
        {"type": "missing", "loc": ("body", "factors", "pest_type"), "msg": "Field required", "input": {}},
        {"type": "missing", "loc": ("body", "factors", "severity"), "msg": "Field required", "input": {}},
        {"type": "missing", "loc": ("body", "factors", "pest_type"), "msg": "Field required", "input": {}},
    ]

    details = format_validation_error_details(errors)

    assert details["summary"] == "Validation failed: missing required fields: factors.pest_type, factors.severity."
    assert details["missingFields"] == ["factors.pest_type", "factors.severity"]


def test_price_book_errors_use_default_location_without_raw_errors():
    errors = [
        {
            "type": "greater_than_equal",
            "loc": ("pest_base_prices", "termites", "one_time"),
            "msg": "Input should be greater than or equal to 0",
            "input": -1,
        },
        {"type": "missing", "loc": (), "msg": "Field required", "input": {}},
    ]

    details = format_validation_error_details(errors, default_location="pricing_matrix.json", include_raw=False)

    assert details["fieldErrors"][0]["location"] == "pricing_matrix.json"
    assert details["fieldErrors"][0]["path"] == "pest_base_prices.termites.one_time"
    assert details["fieldErrors"][1]["path"] == "(root)"
    assert details["missingFields"] == ["(root)"]
    assert "errors" not in details
