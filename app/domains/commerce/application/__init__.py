"""
Commerce Application Layer

Ports, DTOs and the stock, cart and payment components.
"""
