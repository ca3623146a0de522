# -*- coding: utf-8 -*-

"""
Auto mint for an NFT contract.

1. copy .env.example to .env and fill NFT_CONTRACT, PRIVATE_KEY (or MNEMONIC)
2. pick the chain preset with CHAIN / NETWORK, or point RPC_URL at your node
3. python auto_mint.py [--env-file path] [--log-file logs/mint.log]
"""

from mintbot.evm.monitor import main


if __name__ == "__main__":
    main()
