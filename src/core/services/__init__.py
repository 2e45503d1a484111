"""Servicios: construcción de consultas y reenvío de eventos de uso."""
