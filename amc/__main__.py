from amc.main import entrypoint

entrypoint()
