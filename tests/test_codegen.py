"""Tests for TypedDict code generation."""

from __future__ import annotations

from datetime import datetime, timezone
from unittest.mock import AsyncMock, MagicMock

import pytest

from odoo_toolbox.codegen import CodeGenerator
from odoo_toolbox.codegen.formatter import generate_complete_file, generate_model_interface
from odoo_toolbox.codegen.type_mappers import (
    generate_field_doc,
    get_field_type_expression,
    is_writable_field,
    map_field_type,
    model_name_to_class_name,
)
from odoo_toolbox.errors import OdooError
from odoo_toolbox.introspection import FieldDescriptor, Introspector, ModelDescriptor, ModelMetadata


def _field(name: str, type_: str, **kwargs) -> FieldDescriptor:
    return FieldDescriptor(name=name, label=kwargs.pop("label", name.title()), type=type_, **kwargs)


PARTNER = ModelMetadata(
    model=ModelDescriptor(model="res.partner", name="Contact"),
    fields=[
        _field("id", "integer", readonly=True),
        _field("name", "char", required=True, help="Full name\n  of the contact"),
        _field("is_company", "boolean"),
        _field("parent_id", "many2one", relation="res.partner", label="Related Company"),
        _field("category_id", "many2many", relation="res.partner.category"),
        _field("display_name", "char", readonly=True),
        _field("properties", "properties"),
        _field("class", "char"),
    ],
)


class TestTypeMapping:

    @pytest.mark.parametrize("type_,expected", [
        ("char", "str"),
        ("html", "str"),
        ("integer", "int"),
        ("monetary", "float"),
        ("boolean", "bool"),
        ("many2one", "int"),
        ("one2many", "list[int]"),
        ("datetime", "str"),
        ("reference", "Any"),
    ])
    def test_map_field_type(self, type_, expected):
        assert map_field_type(_field("x", type_)) == expected

    def test_required_is_bare(self):
        assert get_field_type_expression(_field("x", "char", required=True)) == "str"

    def test_optional_accepts_false(self):
        assert get_field_type_expression(_field("x", "many2many")) == "NotRequired[list[int] | Literal[False]]"

    def test_optional_bool_and_any(self):
        assert get_field_type_expression(_field("x", "boolean")) == "NotRequired[bool]"
        assert get_field_type_expression(_field("x", "json")) == "NotRequired[Any]"

    def test_writable(self):
        assert is_writable_field(_field("name", "char"))
        assert not is_writable_field(_field("write_date", "datetime"))
        assert not is_writable_field(_field("total", "float", readonly=True))

    @pytest.mark.parametrize("model,expected", [
        ("res.partner", "ResPartner"),
        ("sale.order.line", "SaleOrderLine"),
        ("account_move", "AccountMove"),
    ])
    def test_class_names(self, model, expected):
        assert model_name_to_class_name(model) == expected

    def test_field_doc(self):
        doc = generate_field_doc(_field(
            "parent_id", "many2one", label="Related Company", relation="res.partner",
            required=True, help="The parent\ncompany",
        ))
        assert doc.splitlines() == [
            "    #: Related Company",
            "    #:",
            "    #: The parent company",
            "    #:",
            "    #: @required",
            "    #: @relation res.partner",
        ]


    def test_multiline_label_stays_commented(self):
        doc = generate_field_doc(_field("note", "text", label="Internal\nNote  text"))
        assert doc.splitlines() == ["    #: Internal Note text"]


class TestFormatter:

    def test_model_interface(self):
        code = generate_model_interface(PARTNER)
        assert "class ResPartner(TypedDict):" in code
        assert '"""Contact (``res.partner``)."""' in code
        assert "    name: str\n" in code
        assert "    parent_id: NotRequired[int | Literal[False]]" in code
        assert "    properties: NotRequired[Any]" in code
        assert "# skipped 'class': not a valid attribute name" in code
        assert "# create(values: ResPartnerValues) -> int" in code

    def test_values_class_lists_writable_fields(self):
        code = generate_model_interface(PARTNER)
        values_part = code.split("class ResPartnerValues(TypedDict, total=False):")[1]
        assert "    name: str\n" in values_part
        assert "    parent_id: int | Literal[False]\n" in values_part
        assert "display_name" not in values_part
        assert "    id:" not in values_part

    def test_complete_file_is_valid_python(self):
        other = ModelMetadata(model=ModelDescriptor(model="crm.lead", name="Lead"), fields=[])
        code = generate_complete_file(
            [PARTNER, other], timestamp=datetime(2024, 1, 1, tzinfo=timezone.utc),
        )
        assert "DO NOT edit manually" in code
        assert "Generated at: 2024-01-01T00:00:00+00:00" in code
        assert code.index("class CrmLead(") < code.index("class ResPartner(")

        namespace: dict = {}
        exec(compile(code, "<generated>", "exec"), namespace)
        assert namespace["__all__"] == [
            "SearchOptions", "ReadOptions", "CreateOptions", "WriteOptions", "UnlinkOptions",
            "CrmLead", "CrmLeadValues", "ResPartner", "ResPartnerValues",
        ]
        assert namespace["ResPartner"].__required_keys__ == frozenset({"name"})
        assert "category_id" in namespace["ResPartnerValues"].__optional_keys__


@pytest.fixture
def introspector():
    mock = MagicMock(spec=Introspector)
    mock.get_models = AsyncMock(return_value=[
        ModelDescriptor(model="res.partner", name="Contact"),
        ModelDescriptor(model="gone.model", name="Gone"),
    ])

    async def get_model_metadata(name, bypass_cache=False):
        if name == "res.partner":
            return PARTNER
        raise OdooError.missing(f"Model '{name}' not found in Odoo instance")

    mock.get_model_metadata = AsyncMock(side_effect=get_model_metadata)
    return mock


class TestCodeGenerator:

    @pytest.mark.asyncio
    async def test_writes_file(self, introspector, tmp_path):
        output = tmp_path / "generated" / "models.py"
        code = await CodeGenerator(introspector).generate(output=output)

        assert output.read_text(encoding="utf-8") == code
        assert "class ResPartner(TypedDict):" in code
        assert "GoneModel" not in code

    @pytest.mark.asyncio
    async def test_explicit_unknown_model_raises(self, introspector):
        with pytest.raises(OdooError):
            await CodeGenerator(introspector).generate(models=["gone.model"])

    @pytest.mark.asyncio
    async def test_non_missing_errors_propagate(self, introspector):
        introspector.get_model_metadata.side_effect = OdooError.access("denied")
        with pytest.raises(OdooError):
            await CodeGenerator(introspector).collect()
