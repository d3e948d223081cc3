"""Tests for specgen.parser.extractor."""

from __future__ import annotations

from typing import Any

import pytest

from specgen.exceptions import SpecParseError
from specgen.models import EMPTY, ENUM, INT, MAP, OBJECT, STR, Dialect, TypeDef
from specgen.parser.extractor import (
    _fallback_operation_name,
    _merge_parameters,
    build_api_def,
)


class TestBuildApiDefOpenApi3:
    """The OpenAPI 3.0 tickets document."""

    def test_dialect_and_client_name(self, tickets_raw: dict[str, Any]) -> None:
        api = build_api_def(tickets_raw, "TicketClient")
        assert api.dialect is Dialect.OPENAPI_3
        assert api.client_def.name == "TicketClient"

    def test_models(self, tickets_raw: dict[str, Any]) -> None:
        api = build_api_def(tickets_raw, "ApiClient")
        (ticket,) = api.models_def
        assert ticket.name == "TicketDTO"
        assert [(p.name, p.optional) for p in ticket.properties] == [
            ("id", False),
            ("status", True),
        ]

    def test_path_level_parameter_is_merged(self, tickets_raw: dict[str, Any]) -> None:
        api = build_api_def(tickets_raw, "ApiClient")
        (member,) = api.client_def.members
        assert member.name == "getTicket"
        assert len(member.args) == 1
        assert member.args[0].name == "id"
        assert member.args[0].optional is False
        assert member.return_type_def == TypeDef(type_name="TicketDTO")


class TestBuildApiDefSwagger2:
    """The Swagger 2.0 petstore document."""

    def test_models_in_declaration_order(self, petstore_raw: dict[str, Any]) -> None:
        api = build_api_def(petstore_raw, "ApiClient")
        assert [m.name for m in api.models_def] == [
            "Pet",
            "NewPet",
            "Owner",
            "PetStatus",
            "ApiError",
            "Composite",
        ]

    def test_model_kinds(self, petstore_raw: dict[str, Any]) -> None:
        api = build_api_def(petstore_raw, "ApiClient")
        models = {m.name: m for m in api.models_def}
        assert models["PetStatus"].type_name == ENUM
        assert models["PetStatus"].properties == ("available", "pending", "sold")
        assert models["Composite"].type_name == OBJECT
        assert models["Composite"].properties == ()

        pet = {p.name: p.type_def for p in models["Pet"].properties}
        assert pet["id"].type_name == INT
        assert pet["status"] == TypeDef(type_name="PetStatus")
        assert pet["attributes"] == TypeDef(type_name=MAP, value=TypeDef(type_name=STR))

    def test_members_in_path_and_verb_order(self, petstore_raw: dict[str, Any]) -> None:
        api = build_api_def(petstore_raw, "ApiClient")
        assert [m.name for m in api.client_def.members] == [
            "listPets",
            "createPet",
            "showPetById",
            "deletePet",
        ]

    def test_parameter_ref_is_dereferenced(self, petstore_raw: dict[str, Any]) -> None:
        api = build_api_def(petstore_raw, "ApiClient")
        list_pets = api.client_def.members[0]
        assert [a.name for a in list_pets.args] == ["limit", "pageSize", "tags"]
        assert list_pets.args[1].type_def.type_name == INT
        assert list_pets.args[2].type_def == TypeDef(type_name=STR, array=True)
        assert list_pets.return_type_def == TypeDef(type_name="Pet", array=True)

    def test_body_parameter_schema(self, petstore_raw: dict[str, Any]) -> None:
        api = build_api_def(petstore_raw, "ApiClient")
        create_pet = api.client_def.members[1]
        assert create_pet.args[0].type_def == TypeDef(type_name="NewPet")
        assert create_pet.return_type_def == TypeDef(type_name="Pet")

    def test_no_content_response(self, petstore_raw: dict[str, Any]) -> None:
        api = build_api_def(petstore_raw, "ApiClient")
        delete_pet = api.client_def.members[3]
        assert [a.name for a in delete_pet.args] == ["petId"]
        assert delete_pet.return_type_def.type_name == EMPTY


class TestBuildApiDefEdgeCases:
    def test_missing_definitions_raises(self) -> None:
        with pytest.raises(SpecParseError, match="Missing 'definitions'"):
            build_api_def({"swagger": "2.0", "paths": {}}, "ApiClient")

    def test_missing_components_schemas_raises(self) -> None:
        with pytest.raises(SpecParseError, match="components.schemas"):
            build_api_def({"openapi": "3.0.0", "components": {}}, "ApiClient")

    def test_non_mapping_definitions_raises(self) -> None:
        with pytest.raises(SpecParseError, match="must be a mapping"):
            build_api_def({"swagger": "2.0", "definitions": []}, "ApiClient")

    def test_missing_paths_gives_no_members(self) -> None:
        api = build_api_def({"swagger": "2.0", "definitions": {}}, "ApiClient")
        assert api.client_def.members == ()
        assert api.models_def == ()

    def test_non_verb_keys_are_ignored(self) -> None:
        doc = {
            "swagger": "2.0",
            "definitions": {},
            "paths": {
                "/x": {
                    "summary": "not an operation",
                    "x-internal": {"operationId": "nope"},
                    "put": {"operationId": "putX", "responses": {}},
                    "get": {"operationId": "getX", "responses": {}},
                }
            },
        }
        api = build_api_def(doc, "ApiClient")
        assert [m.name for m in api.client_def.members] == ["putX", "getX"]

    def test_missing_operation_id_uses_fallback(self, plain_output, capsys) -> None:
        doc = {
            "swagger": "2.0",
            "definitions": {},
            "paths": {"/pets/{petId}": {"get": {"responses": {}}}},
        }
        api = build_api_def(doc, "ApiClient")
        assert api.client_def.members[0].name == "getPetsByPetId"
        assert "has no operationId" in capsys.readouterr().err

    def test_duplicate_operation_ids_are_kept(self, plain_output, capsys) -> None:
        doc = {
            "swagger": "2.0",
            "definitions": {},
            "paths": {
                "/a": {"get": {"operationId": "fetch"}},
                "/b": {"get": {"operationId": "fetch"}},
            },
        }
        api = build_api_def(doc, "ApiClient")
        assert [m.name for m in api.client_def.members] == ["fetch", "fetch"]
        assert "Duplicate operationId 'fetch'" in capsys.readouterr().err

    def test_response_ref_is_dereferenced(self) -> None:
        doc = {
            "openapi": "3.0.0",
            "components": {
                "schemas": {},
                "responses": {
                    "PetResponse": {
                        "content": {
                            "application/json": {
                                "schema": {"$ref": "#/components/schemas/Pet"}
                            }
                        }
                    }
                },
            },
            "paths": {
                "/pet": {
                    "get": {
                        "operationId": "getPet",
                        "responses": {"200": {"$ref": "#/components/responses/PetResponse"}},
                    }
                }
            },
        }
        api = build_api_def(doc, "ApiClient")
        assert api.client_def.members[0].return_type_def.type_name == "Pet"

    def test_unresolvable_parameter_ref_raises(self) -> None:
        doc = {
            "swagger": "2.0",
            "definitions": {},
            "paths": {
                "/x": {
                    "get": {
                        "operationId": "getX",
                        "parameters": [{"$ref": "#/parameters/Missing"}],
                    }
                }
            },
        }
        with pytest.raises(SpecParseError, match="Cannot resolve \\$ref"):
            build_api_def(doc, "ApiClient")

    def test_circular_parameter_ref_raises(self) -> None:
        doc = {
            "swagger": "2.0",
            "definitions": {},
            "parameters": {
                "A": {"$ref": "#/parameters/B"},
                "B": {"$ref": "#/parameters/A"},
            },
            "paths": {
                "/x": {
                    "get": {"operationId": "getX", "parameters": [{"$ref": "#/parameters/A"}]}
                }
            },
        }
        with pytest.raises(SpecParseError, match="Circular"):
            build_api_def(doc, "ApiClient")


class TestMergeParameters:
    def test_operation_overrides_path_level(self) -> None:
        path_params = [
            {"name": "id", "in": "path", "type": "string"},
            {"name": "trace", "in": "header", "type": "string"},
        ]
        op_params = [{"name": "id", "in": "path", "type": "integer"}]
        merged = _merge_parameters(path_params, op_params)
        assert merged == [
            {"name": "trace", "in": "header", "type": "string"},
            {"name": "id", "in": "path", "type": "integer"},
        ]

    def test_same_name_different_location_kept(self) -> None:
        merged = _merge_parameters(
            [{"name": "id", "in": "query"}], [{"name": "id", "in": "header"}]
        )
        assert len(merged) == 2


class TestFallbackOperationName:
    @pytest.mark.parametrize(
        ("method", "path", "expected"),
        [
            ("get", "/pets", "getPets"),
            ("delete", "/pets/{petId}", "deletePetsByPetId"),
            ("post", "/", "post"),
            ("get", "/tickets/{id}/comments", "getTicketsByIdComments"),
        ],
    )
    def test_names(self, method: str, path: str, expected: str) -> None:
        assert _fallback_operation_name(method, path) == expected
