"""Tests for PKPass.from_source (clones and templates)."""
import json
import sys
from pathlib import Path

import pytest

PROJECT_ROOT = Path(__file__).resolve().parent.parent
SRC_DIR = PROJECT_ROOT / "src"
if str(SRC_DIR) not in sys.path:
    sys.path.insert(0, str(SRC_DIR))

from conftest import PNG_BYTES  # noqa: E402
from walletpass.core.errors import ModelNotFoundError  # noqa: E402
from walletpass.core.pkpass import PKPass  # noqa: E402
from walletpass.schemas import Template  # noqa: E402

REGENERATED = {"manifest.json", "signature", "pass.json"}


@pytest.fixture
def source(certificates) -> PKPass:
    pkpass = PKPass({"icon.png": PNG_BYTES, "logo.png": PNG_BYTES}, certificates, {"serialNumber": "1"})
    pkpass.type = "boardingPass"
    pkpass.transit_type = "PKTransitTypeTrain"
    pkpass.primary_fields.push({"key": "from", "label": "FROM", "value": "Milano"})
    pkpass.localize("it", {"FROM": "DA"})
    return pkpass


@pytest.mark.unit
@pytest.mark.parametrize("value", [None, "", {}])
def test_from_source_requires_a_source(value):
    """Test from_source refuses a missing source."""
    with pytest.raises(TypeError):
        PKPass.from_source(value)


@pytest.mark.unit
def test_from_source_rejects_invalid_templates():
    """Test invalid templates raise TypeError."""
    with pytest.raises(TypeError):
        PKPass.from_source({"model": ""})
    with pytest.raises(TypeError):
        PKPass.from_source({"certificates": {}})


@pytest.mark.unit
def test_clone_round_trip(source):
    """Test a closed pass clones into an equivalent pass."""
    original = source.get_as_raw()

    clone = PKPass.from_source(source)
    cloned = clone.get_as_raw()

    assert set(cloned) == set(original)
    for path in set(original) - REGENERATED:
        assert cloned[path] == original[path]
        assert cloned[path] is not original[path]


@pytest.mark.unit
def test_clone_of_open_pass_keeps_state(source):
    """Test cloning an open pass keeps props, fields and translations."""
    clone = PKPass.from_source(source, {"serialNumber": "2"})

    assert not source.is_frozen
    assert clone.type == "boardingPass"
    assert clone.transit_type == "PKTransitTypeTrain"
    assert clone.primary_fields == source.primary_fields
    assert clone.languages == ["it"]
    assert clone.certificates is source.certificates
    assert clone.props["serialNumber"] == "2"
    assert source.props["serialNumber"] == "1"


@pytest.mark.unit
def test_clone_is_independent(source):
    """Test changes to a clone do not reach the source."""
    clone = PKPass.from_source(source)
    clone.primary_fields.pop()

    assert len(source.primary_fields) == 1
    assert clone.files["icon.png"] is not source.files["icon.png"]


@pytest.mark.integration
def test_from_template(model_dir, certificates):
    """Test a pass is built from a template folder."""
    pkpass = PKPass.from_source({"model": str(model_dir), "certificates": certificates})

    assert pkpass.type == "storeCard"
    assert pkpass.primary_fields[0]["value"] == "21.00"
    assert pkpass.languages == ["it"]

    raw = pkpass.get_as_raw()
    assert {"icon.png", "icon@2x.png", "logo.png", "it.lproj/logo.png", "it.lproj/pass.strings"} <= set(raw)
    assert json.loads(raw["pass.json"])["serialNumber"] == "0001"


@pytest.mark.integration
def test_from_template_model_without_extension(model_dir, certificates):
    """Test the .pass extension is added to model paths."""
    template = Template(model=str(model_dir.with_suffix("")), certificates=certificates)

    pkpass = PKPass.from_source(template, {"serialNumber": "0002"})

    assert pkpass.props["serialNumber"] == "0002"


@pytest.mark.integration
def test_from_missing_template(tmp_path):
    """Test a missing template folder raises ModelNotFoundError."""
    with pytest.raises(ModelNotFoundError):
        PKPass.from_source({"model": str(tmp_path / "missing")})
