from setuptools import setup, find_packages


__version__ = '0.1.0'

with open("README.md", "r") as fh:
    long_desc = fh.read()


setup(
    name='ledgervote',
    version=__version__,
    packages=find_packages(include=['ledgervote', 'ledgervote.*']),
    install_requires=[
        "coloredlogs>=15.0.1",
        "pynacl>=1.5.0",
        "sanic>=23.3.0",
    ],
    extras_require={
        'test': [
            "pytest",
            "sanic-testing>=23.3.0",
        ]
    },
    entry_points={
        'console_scripts': [
            'ledgervote=ledgervote.cli.cmd:main'
        ],
    },
    zip_safe=False,
    description="Stake weighted election engine",
    long_description=long_desc,
    long_description_content_type="text/markdown",
    author='LedgerVote',
    classifiers=[
        'Programming Language :: Python :: 3',
    ],
    python_requires='>=3.8',
)
