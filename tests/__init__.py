"""
Test suite for FBA Warehouse.

Run all tests: pytest
Run with coverage: pytest --cov=. --cov-report=html
Run unit tests only: pytest tests/unit/
Run specific file: pytest tests/unit/test_amazon_sp_api.py -v
"""
