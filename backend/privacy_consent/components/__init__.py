"""
Components layer: the pure consent codec.

- `contracts.py`: frozen data models
- `decoder.py` / `encoder.py`: inbound and outbound header values
- `compactor.py`: matrix to wire groups
- `query.py`: consent checks over a decoded state

Nothing here touches HTTP objects; see `privacy_consent.core.middleware`.
"""
