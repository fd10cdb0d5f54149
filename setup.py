from setuptools import setup, find_packages

def parse_requirements(filename):
    with open(filename, 'r') as f:
        return [line.strip() for line in f.readlines() \
                if line.strip() and not line.startswith("#")]

setup(
    name="mnist-learner",
    version="0.1.0",
    description="Reproducible MNIST digit classifier training with PyTorch",
    packages=find_packages(include=['mnist_learner', 'mnist_learner.*']),
    python_requires=">=3.10",
    install_requires=parse_requirements('requirements.txt'),
    extras_require={"test": ["pytest>=7.0"]},
    entry_points={
        "console_scripts": ["mnist-learner=mnist_learner.cli_app:app"],
    },
)
