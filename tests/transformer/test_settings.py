"""Tests for TransformerSettings and ConfigScope."""

from pybeans.model.field import FieldMapping, FieldTransformer
from pybeans.transformer.settings import DEFAULT_MAX_DEPTH, TransformerProperties, TransformerSettings


class TestTransformerSettings:
    def test_defaults(self):
        settings = TransformerSettings()
        assert settings.max_depth == DEFAULT_MAX_DEPTH == 64
        assert not settings.default_value_for_missing_field
        assert not settings.flat_field_name_transformation
        assert not settings.validation_enabled

    def test_from_properties(self):
        props = TransformerProperties(flat_field_name_transformation=True, max_depth=3)
        settings = TransformerSettings.from_properties(props)
        assert settings.flat_field_name_transformation
        assert settings.max_depth == 3

    def test_entries_keyed_by_destination(self):
        settings = TransformerSettings()
        settings.add_mapping(FieldMapping("a", "x"))
        settings.add_mapping(FieldMapping("b", "x"))
        assert settings.field_mappings["x"].source_field_name == "b"

    def test_snapshot_is_independent(self):
        settings = TransformerSettings()
        settings.add_mapping(FieldMapping("a", "x"))
        snapshot = settings.snapshot()
        settings.add_mapping(FieldMapping("b", "y"))
        settings.skipped_fields.add("z")
        settings.max_depth = 1
        assert list(snapshot.field_mappings) == ["x"]
        assert snapshot.skipped_fields == set()
        assert snapshot.max_depth == 64


class TestConfigScope:
    def test_paths_are_scoped(self):
        scope = TransformerSettings().scope().nested("address").nested("geo")
        assert scope.prefix == "address.geo"
        assert scope.path_of("lat") == "address.geo.lat"

    def test_lookups_use_full_path(self):
        settings = TransformerSettings()
        settings.add_mapping(FieldMapping("town", "address.city"))
        settings.skipped_fields.add("address.zip")
        scope = settings.scope().nested("address")
        assert scope.mapping_for("city").source_field_name == "town"
        assert settings.scope().mapping_for("city") is None
        assert scope.is_skipped("zip")
        assert not settings.scope().is_skipped("zip")

    def test_flat_mode_also_matches_terminal_name(self):
        settings = TransformerSettings(flat_field_name_transformation=True)
        settings.add_transformer(FieldTransformer("city", str.upper))
        settings.skipped_fields.add("zip")
        scope = settings.scope().nested("address")
        assert scope.transformer_for("city") is settings.field_transformers["city"]
        assert scope.is_skipped("zip")

    def test_terminal_name_ignored_without_flat_mode(self):
        settings = TransformerSettings()
        settings.add_transformer(FieldTransformer("city", str.upper))
        assert settings.scope().nested("address").transformer_for("city") is None
