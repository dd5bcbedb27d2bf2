from .jsonformat import from_dict, from_json, to_dict, to_json
