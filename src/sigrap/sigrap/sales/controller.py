from __future__ import annotations

from flask import Flask, jsonify, request

from ..common.datetime_utils import parse_iso_datetime
from ..common.http import json_body
from ..common.validators import require_int
from ..core.constants import API_PREFIX
from ..core.exceptions import ValidationError
from ..container import Container
from .schemas import SaleData, sale_to_json


def parse_id_list(payload) -> list[int]:
    if not isinstance(payload, list):
        raise ValidationError("Request body must be a JSON list of ids")
    return [require_int(value, f"ids[{i}]") for i, value in enumerate(payload)]


def register(app: Flask, container: Container) -> None:
    prefix = f"{API_PREFIX}/sales"
    service = container.sale_service

    @app.route(prefix, methods=["GET"], endpoint="sales_list")
    def sales_list():
        return jsonify([sale_to_json(s) for s in service.find_all()])

    @app.route(f"{prefix}/<int:sale_id>", methods=["GET"], endpoint="sales_get")
    def sales_get(sale_id: int):
        return jsonify(sale_to_json(service.find_by_id(sale_id)))

    @app.route(f"{prefix}/employee/<int:employee_id>", methods=["GET"], endpoint="sales_by_employee")
    def sales_by_employee(employee_id: int):
        return jsonify([sale_to_json(s) for s in service.find_by_employee(employee_id)])

    @app.route(f"{prefix}/customer/<int:customer_id>", methods=["GET"], endpoint="sales_by_customer")
    def sales_by_customer(customer_id: int):
        return jsonify([sale_to_json(s) for s in service.find_by_customer(customer_id)])

    @app.route(f"{prefix}/created-between", methods=["GET"], endpoint="sales_created_between")
    def sales_created_between():
        start = parse_iso_datetime(request.args.get("startDate"), "startDate")
        end = parse_iso_datetime(request.args.get("endDate"), "endDate")
        return jsonify([sale_to_json(s) for s in service.find_created_between(start, end)])

    @app.route(prefix, methods=["POST"], endpoint="sales_create")
    def sales_create():
        sale = service.create(SaleData.from_json(json_body()))
        return jsonify(sale_to_json(sale)), 201

    @app.route(f"{prefix}/<int:sale_id>", methods=["PUT"], endpoint="sales_update")
    def sales_update(sale_id: int):
        sale = service.update(sale_id, SaleData.from_json(json_body()))
        return jsonify(sale_to_json(sale))

    @app.route(f"{prefix}/<int:sale_id>", methods=["DELETE"], endpoint="sales_delete")
    def sales_delete(sale_id: int):
        service.delete(sale_id)
        return "", 204

    @app.route(f"{prefix}/delete-many", methods=["DELETE"], endpoint="sales_delete_many")
    def sales_delete_many():
        service.delete_many(parse_id_list(json_body()))
        return "", 204
