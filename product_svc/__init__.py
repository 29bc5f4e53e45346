"""Product catalog service.

CRUD and stock-adjustment operations over a relational store, with a shared
filterable-list query engine for every listable entity.
"""
