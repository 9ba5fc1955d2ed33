from setuptools import setup, find_packages

setup(
    name="membench",
    version="0.1.0",
    description="Cross-runtime memory benchmark harness",
    packages=find_packages(include=['membench', 'membench.*']),
    install_requires=[
        'pyyaml>=5.1',
        'pydantic>=2.6',
        'click>=8.0',
        'rich>=12.0',
        'numpy>=1.20',
        'pandas>=1.3',
        'psutil>=5.8',
    ],
    extras_require={
        'test': [
            'pytest>=7.0',
        ],
    },
    entry_points={
        'console_scripts': [
            'membench=membench.cli:main',
        ],
    },
    python_requires='>=3.8',
)
