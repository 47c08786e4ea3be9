import json

import pytest

from template import Configuration
from template import TemplateError
from template import load_template
from template import save_template
from template import summarize


class TestParse:

    def test_fields(self, configuration):
        assert configuration.environment_type == 2016
        assert configuration.level == 4
        assert configuration.comment == "mech parts"
        assert len(configuration.facilities) == 5
        assert configuration.facilities[4].output_material_id is None
        assert configuration.routes[2].path == [3, 4]

    def test_unknown_keys_survive(self, template_data):
        template_data["Extra"] = {"keep": True}
        template_data["P"][0]["Z"] = 1
        result = Configuration.from_dict(template_data).to_dict()
        assert result["Extra"] == {"keep": True}
        assert result["P"][0]["Z"] == 1
        assert result == template_data

    def test_missing_output_key_not_added(self, template_data):
        del template_data["P"][4]["S"]
        result = Configuration.from_dict(template_data).to_dict()
        assert "S" not in result["P"][4]

    def test_route_outside_template(self, template_data):
        template_data["R"].append({"P": [1, 9], "Q": 1, "T": 100})
        with pytest.raises(TemplateError, match=r"references facilities \[9\]"):
            Configuration.from_dict(template_data)

    def test_empty_route(self, template_data):
        template_data["R"][0]["P"] = []
        with pytest.raises(TemplateError, match="empty path"):
            Configuration.from_dict(template_data)

    def test_bad_quantity(self, template_data):
        template_data["R"][0]["Q"] = "lots"
        with pytest.raises(TemplateError, match="quantity"):
            Configuration.from_dict(template_data)

    @pytest.mark.parametrize("key", ["Pln", "P"])
    def test_missing_top_level(self, template_data, key):
        del template_data[key]
        with pytest.raises(TemplateError, match=key):
            Configuration.from_dict(template_data)

    @pytest.mark.parametrize("key", ["P", "R"])
    def test_pins_and_routes_must_be_lists(self, template_data, key):
        template_data[key] = {"1": template_data[key][0]}
        with pytest.raises(TemplateError, match=f"'{key}' must be a list"):
            Configuration.from_dict(template_data)

    def test_route_path_must_be_list(self, template_data):
        template_data["R"][0]["P"] = 1
        with pytest.raises(TemplateError, match="path must be a list"):
            Configuration.from_dict(template_data)

    def test_facility_without_type(self, template_data):
        del template_data["P"][1]["T"]
        with pytest.raises(TemplateError, match="Facility #2"):
            Configuration.from_dict(template_data)


def test_route_materials_in_order(configuration):
    assert configuration.route_materials() == [100, 200, 300]


def test_load_and_save(tmp_path, template_path, template_data):
    configuration = load_template(template_path)
    out = tmp_path / "out.json"
    save_template(configuration, out)
    assert json.loads(out.read_text()) == template_data


def test_load_malformed(tmp_path):
    path = tmp_path / "bad.json"
    path.write_text("[1, 2")
    with pytest.raises(TemplateError, match="Malformed"):
        load_template(path)


def test_summarize(catalog, configuration):
    summary = summarize(configuration, catalog)
    assert summary["environment"] == "Barren"
    assert summary["facilities"] == {"Extractor": 2, "Basic": 1, "Advanced": 1, "Unknown": 1}
    assert summary["products"] == {
        "P0": ["Base Metals [100]"],
        "P1": ["Reactive Metals [200]"],
        "P2": ["Mechanical Parts [300]"],
    }
    assert summary["routes"] == 4
