"""Tests for the templates module."""

import pytest

from stripegen import rust_type as rt
from stripegen.errors import InvariantViolation
from stripegen.objects import EnumVariant, FieldedEnumVariant, RustEnum, StructField
from stripegen.operations import DeleteParams, GetParams, PathParam, PostParams, RequestSpec, StripeOperation
from stripegen.rust_type import DeserDefault
from stripegen.templates import (
    Derive,
    FieldLine,
    VariantLine,
    derives_line,
    doc_comment,
    render_dot,
    render_enum,
    render_fielded_enum,
    render_mod_file,
    render_object_trait,
    render_request,
    render_struct,
    rust_str,
    struct_derives,
)


def _request(operation, path, params, path_params=()):
    return RequestSpec(
        operation=StripeOperation.from_dict(
            {
                "method_name": "x",
                "method_on": "service",
                "method_type": "custom",
                "operation": operation,
                "path": path,
            }
        ),
        operation_id=f"{operation.capitalize()}Thing",
        params=params,
        returned=rt.simple(rt.STRING),
        path_params=[PathParam(n, rt.STRING) for n in path_params],
    )


class TestDerives:
    """Derive lists are deduplicated and printed in a fixed order."""

    def test_baseline(self):
        assert derives_line() == "Clone, Debug"

    def test_order_independent_of_input(self):
        line = derives_line([Derive.SERIALIZE, Derive.DEFAULT, Derive.DESERIALIZE, Derive.SERIALIZE])
        assert line == "Clone, Debug, Default, serde::Deserialize, serde::Serialize"

    def test_struct_default_only_when_all_optional(self):
        assert Derive.DEFAULT in struct_derives(True)
        assert Derive.DEFAULT not in struct_derives(False)


class TestDocComment:
    def test_empty(self):
        assert doc_comment(None) == ""
        assert doc_comment("   ") == ""

    def test_single_sentence(self):
        assert doc_comment("Funds held.") == "/// Funds held.\n"

    def test_first_sentence_split(self):
        assert doc_comment("First part. Second part.") == "/// First part.\n///\n/// Second part.\n"

    def test_indented_with_blank_lines(self):
        assert doc_comment("Line one\n\nLine two", 1) == "    /// Line one\n    ///\n    /// Line two\n"


class TestRustStr:
    def test_escapes(self):
        assert rust_str('a "quoted" \\ value') == 'a \\"quoted\\" \\\\ value'


class TestRenderStruct:
    def test_fields_and_attributes(self):
        fields = [
            FieldLine(StructField("id", rt.simple(rt.STRING), doc_comment="Unique identifier."), "String"),
            FieldLine(
                StructField(
                    "type_",
                    rt.option(rt.simple(rt.STRING)),
                    rename_as="type",
                    skip_serializing_if="Option::is_none",
                ),
                "Option<String>",
            ),
            FieldLine(
                StructField("items", rt.vec(rt.simple(rt.STRING)), deser_default=DeserDefault()),
                "Vec<String>",
            ),
        ]
        out = render_struct("Thing", fields, struct_derives(False), "A thing.")
        assert out == (
            "/// A thing.\n"
            "#[derive(Clone, Debug, serde::Deserialize, serde::Serialize)]\n"
            "pub struct Thing {\n"
            "    /// Unique identifier.\n"
            "    pub id: String,\n"
            "\n"
            '    #[serde(rename = "type")]\n'
            '    #[serde(skip_serializing_if = "Option::is_none")]\n'
            "    pub type_: Option<String>,\n"
            "\n"
            "    #[serde(default)]\n"
            "    pub items: Vec<String>,\n"
            "}\n"
        )


class TestRenderEnum:
    """Plain enums with their helper impls."""

    def _enum(self, default=None):
        enum = RustEnum(default_variant=default)
        enum.add_variant(EnumVariant("active", "Active"))
        enum.add_variant(EnumVariant("2020-08-27", "V2020_08_27"))
        return enum

    def test_definition(self):
        out = render_enum("Status", self._enum())
        assert out.startswith(
            "#[derive(Clone, Copy, Debug, serde::Deserialize, Eq, Ord, PartialEq, PartialOrd, serde::Serialize)]\n"
            '#[serde(rename_all = "snake_case")]\n'
            "pub enum Status {\n"
            "    Active,\n"
            '    #[serde(rename = "2020-08-27")]\n'
            "    V2020_08_27,\n"
            "}\n"
        )
        assert '            Self::Active => "active",\n' in out
        assert "impl AsRef<str> for Status {" in out
        assert "impl std::fmt::Display for Status {" in out
        assert "impl Default" not in out

    def test_default(self):
        out = render_enum("Status", self._enum(default="Active"))
        assert out.endswith(
            "impl Default for Status {\n"
            "    fn default() -> Self {\n"
            "        Self::Active\n"
            "    }\n"
            "}\n"
        )


class TestRenderFieldedEnum:
    def test_untagged(self):
        variants = [
            VariantLine(FieldedEnumVariant("Customer", rt.STRING), "crate::generated::Customer"),
            VariantLine(FieldedEnumVariant("Id", rt.STRING, rename_as="id"), "String"),
        ]
        out = render_fielded_enum("Target", variants, default_variant="Id")
        assert out == (
            "#[derive(Clone, Debug, serde::Deserialize, serde::Serialize)]\n"
            '#[serde(untagged, rename_all = "snake_case")]\n'
            "pub enum Target {\n"
            "    Customer(crate::generated::Customer),\n"
            '    #[serde(rename = "id")]\n'
            "    Id(String),\n"
            "}\n"
            "\n"
            "impl Default for Target {\n"
            "    fn default() -> Self {\n"
            "        Self::Id(Default::default())\n"
            "    }\n"
            "}\n"
        )


class TestRenderRequest:
    """Request functions and their path arguments."""

    def test_plain_path(self):
        req = _request("get", "/v1/balance", GetParams(query=rt.simple(rt.STRING)))
        out = render_request(req, "crate::generated::Balance", "GetBalanceParams")
        assert out == (
            "pub fn get_thing(\n"
            "    client: &crate::Client,\n"
            "    params: GetBalanceParams,\n"
            ") -> crate::Response<crate::generated::Balance> {\n"
            '    client.get_query("/balance", params)\n'
            "}\n"
        )

    def test_path_params(self):
        req = _request(
            "post",
            "/v1/customers/{customer}/sources/{id}",
            PostParams(body=rt.simple(rt.STRING)),
            path_params=["customer", "id"],
        )
        out = render_request(req, "String", "PostParams")
        assert "    customer: String,\n    id: String,\n    params: PostParams,\n" in out
        assert (
            '    client.post_form(&format!("/customers/{customer}/sources/{id}", '
            "customer = customer, id = id), params)\n"
        ) in out

    def test_delete(self):
        req = _request("delete", "/v1/widgets/{widget}", DeleteParams(), path_params=["widget"])
        out = render_request(req, "String", None)
        assert '    client.delete(&format!("/widgets/{widget}", widget = widget))\n' in out
        assert "params" not in out

    def test_prefix_configurable(self):
        req = _request("get", "/v1/balance", GetParams(query=rt.simple(rt.STRING)))
        out = render_request(req, "String", "P", path_prefix="")
        assert 'client.get_query("/v1/balance", params)' in out

    def test_description(self):
        req = _request("get", "/v1/balance", GetParams(query=rt.simple(rt.STRING)))
        req.description = "Retrieves the balance."
        assert render_request(req, "String", "P").startswith("/// Retrieves the balance.\npub fn get_thing(")

    def test_path_param_mismatch(self):
        req = _request("get", "/v1/balance", GetParams(query=rt.simple(rt.STRING)), path_params=["id"])
        with pytest.raises(InvariantViolation):
            render_request(req, "String", "P")


class TestRenderObjectTrait:
    def test_with_id(self):
        out = render_object_trait("Widget", "WidgetId")
        assert out == (
            "impl crate::Object for Widget {\n"
            "    type Id = crate::ids::WidgetId;\n"
            "    fn id(&self) -> Self::Id {\n"
            "        self.id.clone()\n"
            "    }\n"
            "\n"
            "    fn object(&self) -> &'static str {\n"
            "        todo!()\n"
            "    }\n"
            "}\n"
        )

    def test_without_id(self):
        out = render_object_trait("Balance", None)
        assert "    type Id = ();\n    fn id(&self) -> Self::Id {\n    }\n" in out


class TestRenderModFile:
    def test_reexports(self):
        assert render_mod_file(["balance", "issuing_card"]) == (
            "pub mod balance;\n"
            "pub use balance::Balance;\n"
            "pub mod issuing_card;\n"
            "pub use issuing_card::IssuingCard;\n"
        )


class TestRenderDot:
    def test_nodes_and_edges(self):
        out = render_dot(["a", "b"], [("a", "b")])
        assert out == 'digraph {\n    "a"\n    "b"\n    "a" -> "b"\n}\n'
