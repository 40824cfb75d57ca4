"""Lindocare storefront"""
