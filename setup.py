from setuptools import setup, find_packages

setup(
    name="cms-reward-factor",
    version="1.0.0",
    description="CMS Star Ratings Reward Factor Calculator",
    author="Medicare Stars Analytics Team",
    packages=find_packages(include=["reward_factor", "reward_factor.*"]),
    py_modules=["reward_factor_cli"],
    install_requires=[
        "pandas>=2.0.0",
        "numpy>=1.24.0",
        "pydantic>=2.0.0",
    ],
    extras_require={
        "test": ["pytest>=7.0.0"],
    },
    entry_points={
        "console_scripts": [
            "reward-factor=reward_factor_cli:main",
        ],
    },
    python_requires=">=3.8",
    classifiers=[
        "Development Status :: 4 - Beta",
        "Intended Audience :: Healthcare Industry",
        "Programming Language :: Python :: 3.8",
        "Programming Language :: Python :: 3.9",
        "Programming Language :: Python :: 3.10",
        "Programming Language :: Python :: 3.11",
    ],
)
