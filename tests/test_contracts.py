"""Tests for contract extraction."""

import logging

import pytest

from quarry.extractors.contracts import (
    analyze_contracts,
    contract_name,
    extract_contract_file,
    extract_json_contract,
    extract_schema_literals,
    extract_type_declarations,
)


class TestContractName:
    """Test contract_name."""

    @pytest.mark.parametrize(
        ("identifier", "expected"),
        [("OrderSchema", "Order"), ("LineItemSchema", "LineItem"), ("Schema", "Schema")],
    )
    def test_strips_schema_suffix(self, identifier, expected):
        """The Schema suffix is removed."""
        assert contract_name(identifier) == expected


class TestExtractSchemaLiterals:
    """Test the structural-literal strategy."""

    def test_extracts_documented_schema(self, order_contract):
        """A schema literal yields name, parsed schema, description and types."""
        contracts = extract_schema_literals("contracts/order.ts", order_contract)

        assert len(contracts) == 1
        contract = contracts[0]
        assert contract.name == "Order"
        assert contract.file == "contracts/order.ts"
        assert contract.description == "Order Data Contract"
        assert contract.types == ["Order"]
        assert contract.schema_ == {
            "type": "object",
            "properties": {"id": {"type": "string"}, "amount": {"type": "number"}},
            "required": ["id", "amount"],
        }

    def test_bare_keys_and_single_quotes(self):
        """JS-style literals are normalized before parsing."""
        content = "export const CustomerSchema = {\n  type: 'object',\n  required: ['id',],\n};\n"
        contracts = extract_schema_literals("contracts/customer.ts", content)
        assert contracts[0].schema_ == {"type": "object", "required": ["id"]}
        assert contracts[0].description is None

    def test_type_annotated_declaration(self):
        """A type annotation between name and value is allowed."""
        content = "export const InvoiceSchema: JSONSchema = { type: 'object' };\n"
        contracts = extract_schema_literals("contracts/invoice.ts", content)
        assert [c.name for c in contracts] == ["Invoice"]

    def test_broken_literal_skipped_others_kept(self, caplog):
        """A literal that fails to parse doesn't stop later literals."""
        content = (
            "export const BrokenSchema = { type: baseType };\n"
            "export const RefundSchema = { type: 'object' };\n"
        )
        with caplog.at_level(logging.WARNING):
            contracts = extract_schema_literals("contracts/refund.ts", content)

        assert [c.name for c in contracts] == ["Refund"]
        assert "BrokenSchema" in caplog.text

    def test_commented_out_schema_ignored(self):
        """Schema literals inside comments are not contracts."""
        content = (
            "// export const LegacySchema = { type: 'object' };\n"
            "/* export const DraftSchema = { type: 'object' }; */\n"
            "export const OrderSchema = { type: 'object' };\n"
        )
        contracts = extract_schema_literals("contracts/order.ts", content)
        assert [c.name for c in contracts] == ["Order"]

    def test_numeric_keys(self):
        """Schema literals with numeric keys still parse."""
        content = "export const StatusSchema = { 1: 'open', 2: 'closed' };\n"
        contracts = extract_schema_literals("contracts/status.ts", content)
        assert contracts[0].schema_ == {"1": "open", "2": "closed"}

    def test_ignores_non_literal_schemas(self):
        """Schemas built by calls are not object literals."""
        content = "export const OrderSchema = z.object({ id: z.string() });\n"
        assert extract_schema_literals("contracts/order.ts", content) == []

    def test_ignores_non_schema_names(self):
        """Only identifiers ending in Schema count."""
        content = "export const config = { type: 'object' };\n"
        assert extract_schema_literals("contracts/config.ts", content) == []


class TestExtractTypeDeclarations:
    """Test the declaration strategy."""

    def test_extracts_interfaces_in_order(self, user_types):
        """Each exported interface becomes a contract."""
        contracts = extract_type_declarations("types/index.ts", user_types)

        assert [c.name for c in contracts] == ["User", "Product"]
        user = contracts[0]
        assert user.file == "types/index.ts"
        assert user.types == ["User"]
        assert user.description == "A registered user"
        assert user.schema_["type"] == "interface"
        assert user.schema_["definition"].startswith("export interface User {")
        assert user.schema_["definition"].endswith("}")
        assert "price" not in user.schema_["definition"]

    def test_extracts_object_type_aliases(self):
        """Exported object type aliases are declarations too."""
        content = "export type Order = {\n  id: string;\n  items: { sku: string }[];\n};\n"
        contracts = extract_type_declarations("types/order.ts", content)

        assert len(contracts) == 1
        assert contracts[0].schema_["type"] == "type"
        assert contracts[0].schema_["definition"].endswith("}[];\n}")

    def test_generic_and_extending_interfaces(self):
        """Generic parameters and extends clauses are allowed."""
        content = "export interface Page<T> extends Base {\n  items: T[];\n}\n"
        assert [c.name for c in extract_type_declarations("types/page.ts", content)] == ["Page"]

    def test_object_type_in_generic_constraint(self):
        """Braces inside generic parameters don't end the declaration head."""
        content = "export interface Box<T extends { id: string }> {\n  item: T;\n}\n"
        contracts = extract_type_declarations("types/box.ts", content)

        assert [c.name for c in contracts] == ["Box"]
        assert contracts[0].schema_["definition"] == content.rstrip("\n")

    def test_commented_out_declarations_ignored(self):
        """Declarations inside comments are not contracts."""
        content = (
            "// export interface Old { id: string }\n"
            "export interface New {\n  id: string;\n}\n"
        )
        contracts = extract_type_declarations("types/new.ts", content)
        assert [c.name for c in contracts] == ["New"]

    def test_non_object_aliases_ignored(self):
        """Union and primitive aliases are not structural declarations."""
        content = "export type Status = 'open' | 'closed';\nexport type Id = string;\n"
        assert extract_type_declarations("types/status.ts", content) == []


class TestExtractJsonContract:
    """Test JSON contract documents."""

    def test_uses_title_and_description(self):
        """title and description come from the document."""
        content = '{"title": "Shipment", "description": "A shipment", "type": "object"}'
        contracts = extract_json_contract("contracts/shipment.json", content)

        assert contracts[0].name == "Shipment"
        assert contracts[0].description == "A shipment"
        assert contracts[0].schema_["type"] == "object"

    @pytest.mark.parametrize(
        ("path", "expected"),
        [
            ("contracts/order.schema.json", "Order"),
            ("contracts/PaymentSchema.json", "Payment"),
            ("contracts/v2/refund.json", "Refund"),
        ],
    )
    def test_name_from_file(self, path, expected):
        """Without a title the file name is used."""
        assert extract_json_contract(path, '{"type": "object"}')[0].name == expected

    @pytest.mark.parametrize("content", ["{not json", "[1, 2]"])
    def test_invalid_or_non_object_documents(self, content):
        """Malformed or non-object documents yield nothing."""
        assert extract_json_contract("contracts/x.json", content) == []


class TestExtractContractFile:
    """Test strategy selection for contract files."""

    def test_literal_strategy_first(self, order_contract):
        """Schema literals win when present."""
        contracts = extract_contract_file("contracts/order.ts", order_contract)
        assert [c.name for c in contracts] == ["Order"]

    def test_falls_back_to_declarations(self, user_types):
        """Without schema literals, declarations are extracted."""
        contracts = extract_contract_file("contracts/user.ts", user_types)
        assert [c.name for c in contracts] == ["User", "Product"]

    def test_empty_file(self):
        """A file without contracts yields nothing."""
        assert extract_contract_file("contracts/empty.ts", "// Empty file") == []


class TestAnalyzeContracts:
    """Test analyze_contracts end to end."""

    @pytest.mark.asyncio
    async def test_collects_from_contracts_and_type_dirs(
        self, write_files, order_contract, user_types
    ):
        """Contracts and type directories are both scanned."""
        root = write_files({
            "contracts/order.ts": order_contract,
            "src/types/user.ts": user_types,
            "contracts/order.test.ts": order_contract,
            "node_modules/pkg/contracts/order.ts": order_contract,
            "lib/other.ts": user_types,
        })
        contracts = await analyze_contracts(root)

        assert sorted((c.name, c.file) for c in contracts) == [
            ("Order", "contracts/order.ts"),
            ("Product", "src/types/user.ts"),
            ("User", "src/types/user.ts"),
        ]

    @pytest.mark.asyncio
    async def test_broken_file_only_removes_itself(self, write_files, order_contract):
        """A broken contract file does not affect its neighbours."""
        root = write_files({"contracts/order.ts": order_contract})
        baseline = await analyze_contracts(root)

        write_files({"contracts/broken.ts": "export const BrokenSchema = { a: ref, "})
        assert await analyze_contracts(root) == baseline

    @pytest.mark.asyncio
    async def test_empty_project(self, tmp_path):
        """No contract directories, no contracts."""
        assert await analyze_contracts(tmp_path) == []
