from ._files import (
    save_weights_bin,
    load_weights_bin,
    load_input_txt,
    load_label_txt,
)

__all__ = [
    save_weights_bin.__name__,
    load_weights_bin.__name__,
    load_input_txt.__name__,
    load_label_txt.__name__,
]
