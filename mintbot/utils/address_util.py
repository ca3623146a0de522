# -*- coding: utf-8 -*-

from eth_account import Account


ETH_DEFAULT_PATH = "m/44'/60'/0'/0/0"


def eth_account_from_mnemonic(mnemonic, path=ETH_DEFAULT_PATH):
    Account.enable_unaudited_hdwallet_features()
    account = Account.from_mnemonic(mnemonic, account_path=path)
    return {"address": account.address, "privkey": account.key.hex()}


def normalize_privkey(privkey):
    privkey = privkey.strip()
    if not privkey.startswith("0x"):
        privkey = "0x" + privkey
    return privkey


def eth_account_from_key_material(privkey="", mnemonic=""):
    assert privkey or mnemonic, "privkey and mnemonic can't be empty at the same time"
    if privkey:
        return Account.from_key(normalize_privkey(privkey))
    return Account.from_key(normalize_privkey(eth_account_from_mnemonic(mnemonic)["privkey"]))
