"""Wallet service: clients, accounts and transfers between accounts."""