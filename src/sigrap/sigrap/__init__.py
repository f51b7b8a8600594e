"""SIGRAP back office package.

This package is organized by feature modules (products, sales, sale_returns, ...)
with a thin Flask controller layer and service/repository layers.
"""
