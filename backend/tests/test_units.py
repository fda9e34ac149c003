import pytest

from bloodbridge.services.units import to_minor_units

@pytest.mark.parametrize("amount, cents", [
    (10, 1000),
    (25.5, 2550),
    (19.999, 2000),
    # 1.005 * 100 is 100.49999999999999 in binary floating point
    (1.005, 100),
])
def test_to_minor_units(amount, cents):
    assert to_minor_units(amount) == cents
