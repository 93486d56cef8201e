import pytest

from sabor_arte.schemas import (
    CartLine,
    decode_cart_lines,
    decode_details,
    encode_cart_lines,
    encode_details,
)


def test_cart_lines_codec():
    lines = [CartLine(item_id=1, quantity=2, unit_price=5.0), CartLine(item_id=7, quantity=1, price=12.5)]

    raw = encode_cart_lines(lines)

    assert raw == '[{"item_id":1,"quantity":2,"unit_price":5.0},{"item_id":7,"quantity":1,"unit_price":12.5}]'
    assert decode_cart_lines(raw) == lines


@pytest.mark.parametrize("raw", [None, "", "{not json", '{"item_id": 1}', '[{"item_id": "x", "quantity": 1, "unit_price": 1}]'])
def test_corrupt_cart_lines(raw):
    with pytest.raises(ValueError):
        decode_cart_lines(raw)


def test_details_codec():
    assert decode_details(encode_details({"observacao": "sem açúcar"})) == {"observacao": "sem açúcar"}
    assert encode_details(None) is None
    assert decode_details(None) is None


@pytest.mark.parametrize("raw", ["[1, 2]", "oops"])
def test_corrupt_details(raw):
    with pytest.raises(ValueError):
        decode_details(raw)
