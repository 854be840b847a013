from verimed.domain.models import InputShape, InputType
from verimed.services.classifier import classify, determine_input_type


def test_determine_input_type():
    assert determine_input_type("1234567890123") == InputType.BARCODE
    assert determine_input_type("NAFDAC Reg. No.: 04-1234") == InputType.MANUAL
    assert determine_input_type("Paracetamol") == InputType.MANUAL


def test_classify_keeps_three_way_shape():
    c = classify("12345678")
    assert c.shape == InputShape.BARCODE and c.registration_number is None

    c = classify("Reg No: 04-1234")
    assert c.shape == InputShape.REGISTRATION_NUMBER
    assert c.input_type == InputType.MANUAL
    assert c.registration_number == "04-1234"

    c = classify("paracetamol 500mg")
    assert c.shape == InputShape.FREE_TEXT
    assert c.input_type == InputType.MANUAL


def test_barcode_wins_over_structural_code():
    # 13 digit murni: barcode, walau tidak mungkin cocok pola registrasi
    assert classify("0000000000000").input_type == InputType.BARCODE
