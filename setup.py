from setuptools import setup, find_packages

setup(
    name='psxtim',
    version='0.1',
    zip_safe=False,
    packages=find_packages(),
    install_requires=[
        'construct>=2.9',
        'attrs>=17.4',
        'pypng>=0.0.20',
    ],
    extras_require={
        'test': ['pytest'],
    },
    entry_points={
        'console_scripts': [
            'psxtim = psxtim.main:setuptools_entry',
        ],
    },
    classifiers=[
        "Programming Language :: Python :: 3",
        "Topic :: Multimedia :: Graphics :: Graphics Conversion",
    ]
)
