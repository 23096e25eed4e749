# make sure every file can run on any computers, avoid absolute paths and undownloaded packages

#pip install setuptools first if not installed
from setuptools import setup, find_packages
import os


# Read requirements
def read_requirements():
    req_file = os.path.join(os.path.dirname(__file__), 'requirements.txt')
    if os.path.exists(req_file):
        with open(req_file) as f:
            return [line.strip() for line in f if line.strip() and not line.startswith('#')]
    return [
        "pyyaml",
        "numpy",
        "matplotlib",
    ]

setup(
    name="imu_rotation_estimator",
    version="0.1.0",
    description="Complementary-filter camera orientation from asynchronous IMU streams",
    packages=find_packages(include=[
        'state_estimation',
        'state_estimation.*',
        'motion_pipeline',
        'motion_pipeline.*',
        'debug',
        'debug.*',
        'config',
        'config.*',
    ]),
    py_modules=['run_estimator'],
    python_requires=">=3.8",
    install_requires=read_requirements(),
    extras_require={
        'test': ['pytest'],
    },
    package_data={
        '': ['*.yaml', '*.yml', '*.json'],
    },
    include_package_data=True,
    entry_points={
        'console_scripts': [
            'run-estimator=run_estimator:main',
        ],
    },
)
