from sqlstruct.utils.strings import join, string_to_map

__all__ = ['join', 'string_to_map']
