import os
from glob import glob

from setuptools import find_packages, setup

package_name = 'path_tracker'

setup(
    name=package_name,
    version='1.0.0',
    packages=find_packages(exclude=['test']),
    data_files=[
        ('share/ament_index/resource_index/packages', ['resource/' + package_name]),
        ('share/' + package_name, ['package.xml']),
        (os.path.join('share', package_name, 'launch'), glob('launch/*.launch.py')),
        (os.path.join('share', package_name, 'config'), glob('config/*.yaml')),
    ],
    install_requires=['setuptools', 'numpy'],
    extras_require={
        'test': ['pytest'],
    },
    zip_safe=True,
    maintainer='Path Tracker Maintainers',
    maintainer_email='maintainers@example.com',
    description='Pure pursuit path tracking and waypoint path publishing for ground vehicles',
    license='MIT',
    tests_require=['pytest'],
    entry_points={
        'console_scripts': [
            'path_publisher_node = path_tracker.path_publisher_node:main',
            'path_tracker_node = path_tracker.path_tracker_node:main',
        ],
    },
)
