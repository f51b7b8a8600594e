from __future__ import annotations

from flask import Flask, jsonify

from ..common.http import json_body
from ..core.constants import API_PREFIX
from ..container import Container
from ..sales.controller import parse_id_list
from .schemas import SaleReturnData, sale_return_to_json


def register(app: Flask, container: Container) -> None:
    prefix = f"{API_PREFIX}/sale-returns"
    service = container.sale_return_service

    @app.route(prefix, methods=["GET"], endpoint="sale_returns_list")
    def sale_returns_list():
        return jsonify([sale_return_to_json(r) for r in service.find_all()])

    @app.route(f"{prefix}/<int:return_id>", methods=["GET"], endpoint="sale_returns_get")
    def sale_returns_get(return_id: int):
        return jsonify(sale_return_to_json(service.find_by_id(return_id)))

    @app.route(f"{prefix}/original-sale/<int:sale_id>", methods=["GET"], endpoint="sale_returns_by_sale")
    def sale_returns_by_sale(sale_id: int):
        return jsonify([sale_return_to_json(r) for r in service.find_by_original_sale(sale_id)])

    @app.route(prefix, methods=["POST"], endpoint="sale_returns_create")
    def sale_returns_create():
        created = service.create(SaleReturnData.from_json(json_body()))
        return jsonify(sale_return_to_json(created)), 201

    @app.route(f"{prefix}/<int:return_id>", methods=["PUT"], endpoint="sale_returns_update")
    def sale_returns_update(return_id: int):
        updated = service.update(return_id, SaleReturnData.from_json(json_body()))
        return jsonify(sale_return_to_json(updated))

    @app.route(f"{prefix}/<int:return_id>", methods=["DELETE"], endpoint="sale_returns_delete")
    def sale_returns_delete(return_id: int):
        service.delete(return_id)
        return "", 204

    @app.route(f"{prefix}/delete-many", methods=["DELETE"], endpoint="sale_returns_delete_many")
    def sale_returns_delete_many():
        service.delete_many(parse_id_list(json_body()))
        return "", 204
