""" psxtim.defaults - logic for finding default paths """

import os

def get_default_output_dir_with_origin():
    output_dir = os.environ.get('PSXTIM_OUTPUT_DIR', None)
    origin = 'environment'

    if output_dir is None:
        output_dir = os.curdir
        origin = 'default'

    return output_dir, origin


def get_default_output_dir():
    return get_default_output_dir_with_origin()[0]
