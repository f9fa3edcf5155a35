"""Workflows feature module: membership, roles and invitations"""
