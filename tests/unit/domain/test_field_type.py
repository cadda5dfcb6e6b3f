"""Unit tests for the SolrFieldType aggregate."""

import pytest

from solr_schema_builder.domain.field_type import SolrFieldType, SolrFieldTypeBuilder
from solr_schema_builder.errors import FieldTypeDecodeError, MissingFieldTypeError
from solr_schema_builder.schema.analyzers import AnalyzerKind, FieldTypeDefinition
from solr_schema_builder.schema.legacy_json import decode_json


class TestNames:
    def test_get_name(self, base_only_field_type):
        assert base_only_field_type.get_name() == "text_und"

    def test_get_name_without_base_field_type(self):
        with pytest.raises(MissingFieldTypeError, match="broken"):
            SolrFieldType(id="broken").get_name()

    def test_get_field_type_name_is_lenient(self):
        assert SolrFieldType(id="broken").get_field_type_name() == ""

    def test_setters_accept_mappings_and_chain(self):
        entity = SolrFieldType(id="x").set_field_type({"name": "text_x", "class": "solr.TextField"})
        assert isinstance(entity.get_field_type(), FieldTypeDefinition)
        assert entity.get_name() == "text_x"

    def test_variant_setters_accept_none(self, full_field_type):
        full_field_type.set_spellcheck_field_type(None).set_collated_field_type(None)
        assert full_field_type.get_spellcheck_field_type() is None
        assert full_field_type.get_collated_field_type() is None


class TestDomains:
    def test_defaults_to_generic(self, base_only_field_type):
        assert base_only_field_type.get_domains() == ["generic"]

    def test_configured_domains_are_returned_unaltered(self):
        entity = SolrFieldType(id="x", domains=["news", "generic"])
        assert entity.get_domains() == ["news", "generic"]

    def test_blank_and_duplicate_domains_are_dropped(self):
        assert SolrFieldType(id="x", domains=["", "news", "news"]).get_domains() == ["news"]

    def test_options_mirror_domains(self):
        assert SolrFieldType(id="x", domains=["medical"]).get_options() == ["medical"]


class TestFieldTypeJson:
    def test_base_json_uses_legacy_keys(self, base_only_field_type):
        data = decode_json(base_only_field_type.get_field_type_as_json())

        assert list(data) == ["name", "class", "positionIncrementGap", "indexAnalyzer", "queryAnalyzer"]
        assert data["indexAnalyzer"]["tokenizer"] == {"class": "solr.WhitespaceTokenizerFactory"}

    def test_pretty_json_is_multiline(self, base_only_field_type):
        text = base_only_field_type.get_field_type_as_json(pretty=True)
        assert text.startswith('{\n  "name": "text_und"')
        assert decode_json(text) == decode_json(base_only_field_type.get_field_type_as_json())

    def test_set_field_type_as_json_round_trips(self, base_only_field_type):
        text = base_only_field_type.get_field_type_as_json()
        copy = SolrFieldType(id="copy").set_field_type_as_json(text)

        assert copy.get_field_type() == base_only_field_type.get_field_type()
        assert copy.get_field_type_as_json() == text

    def test_set_field_type_as_json_restores_kinds(self):
        entity = SolrFieldType(id="x").set_field_type_as_json(
            '{"name": "t", "multiTermAnalyzer": {"tokenizer": {"class": "solr.KeywordTokenizerFactory"}}}'
        )
        assert entity.get_field_type().analyzers[0].kind is AnalyzerKind.MULTITERM

    @pytest.mark.parametrize("text", ["{", "", "null", '{"class": "solr.TextField"}'])
    def test_invalid_base_json_leaves_entity_unchanged(self, base_only_field_type, text):
        before = base_only_field_type.get_field_type()

        with pytest.raises(FieldTypeDecodeError):
            base_only_field_type.set_field_type_as_json(text)

        assert base_only_field_type.get_field_type() is before

    def test_base_json_without_base_field_type(self):
        with pytest.raises(MissingFieldTypeError):
            SolrFieldType(id="x").get_field_type_as_json()

    def test_unset_variants_are_empty_strings(self, base_only_field_type):
        assert base_only_field_type.get_spellcheck_field_type_as_json() == ""
        assert base_only_field_type.get_unstemmed_field_type_as_json() == ""
        assert base_only_field_type.get_collated_field_type_as_json() == ""

    def test_variant_json_round_trips(self, full_field_type):
        text = full_field_type.get_spellcheck_field_type_as_json()
        entity = SolrFieldType(id="x").set_spellcheck_field_type_as_json(text)

        assert entity.get_spellcheck_field_type() == full_field_type.get_spellcheck_field_type()
        assert decode_json(text)["name"] == "text_spell_de"

    def test_unstemmed_and_collated_json(self, full_field_type):
        entity = (
            SolrFieldType(id="x")
            .set_unstemmed_field_type_as_json(full_field_type.get_unstemmed_field_type_as_json())
            .set_collated_field_type_as_json(full_field_type.get_collated_field_type_as_json())
        )

        assert entity.get_unstemmed_field_type() == full_field_type.get_unstemmed_field_type()
        assert entity.get_collated_field_type().attributes["locale"] == "de"

    @pytest.mark.parametrize("text", ["", "   ", "null"])
    def test_blank_variant_json_clears_variant(self, full_field_type, text):
        full_field_type.set_collated_field_type_as_json(text)
        assert full_field_type.get_collated_field_type() is None

    def test_malformed_variant_json_raises(self, full_field_type):
        with pytest.raises(FieldTypeDecodeError):
            full_field_type.set_spellcheck_field_type_as_json("{not json")
        assert full_field_type.get_spellcheck_field_type() is not None

    def test_json_is_html_safe(self):
        pattern_filter = {"class": "solr.PatternReplaceFilterFactory", "pattern": "<[^>]+>", "replacement": "&"}
        entity = SolrFieldType(id="x").set_field_type(
            {
                "name": "t",
                "analyzers": [{"tokenizer": {"class": "solr.StandardTokenizerFactory"}, "filters": [pattern_filter]}],
            }
        )

        text = entity.get_field_type_as_json()

        assert not set(text) & set("<>&'")
        assert decode_json(text)["analyzer"]["filters"][0]["pattern"] == "<[^>]+>"


class TestFieldTypeXml:
    def test_base_xml_with_comment(self, base_only_field_type):
        xml = base_only_field_type.get_as_xml()

        assert xml.startswith("<!--\n  Fulltext\n  7.0.0\n-->\n")
        assert '<fieldType name="text_und" class="solr.TextField" positionIncrementGap="100">' in xml
        assert '<analyzer type="index">' in xml
        assert '<analyzer type="query">' in xml
        assert '<filter class="solr.WordDelimiterGraphFilterFactory" catenateWords="1"/>' in xml

    def test_base_xml_without_comment(self, base_only_field_type):
        assert base_only_field_type.get_as_xml(add_comment=False).startswith("<fieldType ")

    @pytest.mark.parametrize(
        ("method", "qualifier", "name"),
        [
            ("get_spellcheck_field_type_as_xml", "spellcheck", "text_spell_de"),
            ("get_collated_field_type_as_xml", "collated", "collated_de"),
            ("get_unstemmed_field_type_as_xml", "unstemmed", "text_unstemmed_de"),
        ],
    )
    def test_variant_xml_comment_carries_qualifier(self, full_field_type, method, qualifier, name):
        xml = getattr(full_field_type, method)()

        assert xml.startswith(f"<!--\n  German Text Field {qualifier}\n  7.0.0\n-->\n")
        assert f'<fieldType name="{name}"' in xml

    def test_unset_variant_xml_is_empty(self, base_only_field_type):
        assert base_only_field_type.get_spellcheck_field_type_as_xml() == ""
        assert base_only_field_type.get_collated_field_type_as_xml() == ""
        assert base_only_field_type.get_unstemmed_field_type_as_xml() == ""

    def test_xml_is_deterministic(self, full_field_type):
        assert full_field_type.get_as_xml() == full_field_type.get_as_xml()
        assert full_field_type.get_collated_field_type_as_xml() == full_field_type.get_collated_field_type_as_xml()

    def test_base_xml_without_base_field_type(self):
        with pytest.raises(MissingFieldTypeError):
            SolrFieldType(id="x").get_as_xml()

    def test_solr_configs_as_xml(self, full_field_type):
        xml = full_field_type.get_solr_configs_as_xml()

        assert xml.startswith("<!--\n  German Text Field\n  7.0.0\n-->\n")
        assert '<searchComponent name="suggest" class="solr.SuggestComponent">' in xml
        assert '<str name="name">de</str>' in xml

    def test_raw_solr_config_string_is_verbatim(self):
        entity = SolrFieldType(id="x", solr_configs={"requestHandlers": '<requestHandler name="/x"/>'})
        assert entity.get_solr_configs_as_xml(add_comment=False) == '<requestHandler name="/x"/>\n'

    def test_empty_solr_configs(self, base_only_field_type):
        assert base_only_field_type.get_solr_configs_as_xml() == ""


class TestDynamicFields:
    def test_base_only_entity(self, base_only_field_type):
        assert len(base_only_field_type.get_dynamic_fields()) == 12

    def test_full_entity_order(self, full_field_type):
        fields = full_field_type.get_dynamic_fields(9)

        assert [field.name for field in fields] == [
            "ts_X3b_de_*",
            "tm_X3b_de_*",
            "tos_X3b_de_*",
            "tom_X3b_de_*",
            "tus_X3b_de_*",
            "tum_X3b_de_*",
            "spellcheck_de*",
            "sort_X3b_de_*",
        ]
        assert fields[4].type == "text_unstemmed_de"
        assert fields[-1].doc_values is False

    def test_doc_values_depends_on_version(self, full_field_type):
        assert full_field_type.get_dynamic_fields(5)[-1].to_dict()["docValues"] is False
        assert "docValues" not in full_field_type.get_dynamic_fields(4)[-1].to_dict()

    def test_static_and_copy_fields_are_empty(self, full_field_type):
        assert full_field_type.get_static_fields() == []
        assert full_field_type.get_copy_fields() == []


class TestManagedSchema:
    def test_false_without_managed_filters(self, base_only_field_type):
        assert base_only_field_type.requires_managed_schema() is False

    def test_false_without_analyzers(self):
        entity = SolrFieldType(id="x").set_field_type({"name": "collated", "class": "solr.ICUCollationField"})
        assert entity.requires_managed_schema() is False

    def test_false_without_base_field_type(self):
        assert SolrFieldType(id="x").requires_managed_schema() is False

    def test_true_with_managed_filter_in_any_stage(self, text_und_definition):
        text_und_definition["analyzers"][1]["filters"].append(
            {"class": "solr.ManagedSynonymGraphFilterFactory", "managed": "english"}
        )
        entity = SolrFieldType(id="x").set_field_type(text_und_definition)

        assert entity.requires_managed_schema() is True


class TestTextFiles:
    def test_text_file_names(self, full_field_type):
        assert full_field_type.get_text_file_names() == {
            "stopwords_de.txt": "aber\nalle\n",
            "protwords_de.txt": "",
        }

    def test_custom_code_in_text_file_name(self):
        entity = SolrFieldType(id="x", custom_code="ar", field_type_language_code="ar")
        assert entity.text_file_name("stopwords") == "stopwords_ar_ar.txt"


class TestAvailableValues:
    def test_available_domains(self):
        field_types = [
            SolrFieldType(id="a", domains=["news"]),
            SolrFieldType(id="b", domains=["medical", ""]),
            SolrFieldType(id="c"),
        ]
        assert SolrFieldType.get_available_domains(field_types) == ["generic", "medical", "news"]

    def test_available_domains_of_nothing(self):
        assert SolrFieldType.get_available_domains([]) == ["generic"]

    def test_available_custom_codes(self):
        field_types = [
            SolrFieldType(id="a", custom_code="ar"),
            SolrFieldType(id="b"),
            SolrFieldType(id="c", custom_code="cjk"),
            SolrFieldType(id="d", custom_code="ar"),
        ]
        assert SolrFieldType.get_available_custom_codes(field_types) == ["ar", "cjk"]


class TestBuilder:
    def test_build_populates_entity(self, full_field_type):
        assert full_field_type.id == "text_de_7_0_0"
        assert full_field_type.get_field_type_language_code() == "de"
        assert full_field_type.get_custom_code() is None
        assert full_field_type.get_text_files()["stopwords"] == "aber\nalle\n"
        assert "searchComponents" in full_field_type.get_solr_configs()

    def test_build_requires_base_field_type(self):
        with pytest.raises(MissingFieldTypeError, match="text_xx"):
            SolrFieldTypeBuilder("text_xx").with_label("X").build()

    def test_builder_can_be_reused(self):
        builder = SolrFieldTypeBuilder("x").with_field_type({"name": "t"}).with_domains(["news"])
        first = builder.build()
        second = builder.build()

        first.domains.append("medical")

        assert second.get_domains() == ["news"]
        assert first.get_field_type() is not second.get_field_type()

    def test_empty_custom_code_becomes_none(self):
        entity = SolrFieldTypeBuilder("x").with_custom_code("").with_field_type({"name": "t"}).build()
        assert entity.custom_code is None
