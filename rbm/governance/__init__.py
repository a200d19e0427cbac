"""Governance heuristics: similarity, audit rules, content scoring"""
