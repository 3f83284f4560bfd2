from pathlib import Path

import pytest

from kmeanslab.dataset import (
    Dataframe,
    UnknownDatasetError,
    load_dataset,
    load_htru2,
    load_iris,
    load_rice,
    load_wesad,
)


def _write(path: Path, text: str) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(text, encoding="utf-8")
    return path


IRIS_TEXT = (
    "Id,SepalLengthCm,SepalWidthCm,PetalLengthCm,PetalWidthCm,Species\n"
    "1,5.1,3.5,1.4,0.2,Iris-setosa\n"
    "2,4.9,3.0,1.4,0.2,Iris-setosa\n"
    "3,6.3,3.3,6.0,2.5,Iris-virginica\n"
)


def test_load_iris_reads_features_and_skips_header(tmp_path):
    df = load_iris(_write(tmp_path / "Iris.csv", IRIS_TEXT))
    assert df.name == "iris"
    assert df.data == [
        [5.1, 3.5, 1.4, 0.2],
        [4.9, 3.0, 1.4, 0.2],
        [6.3, 3.3, 6.0, 2.5],
    ]
    assert df.max_rows == len(df.data)
    assert df.features == [
        "SepalLengthCm",
        "SepalWidthCm",
        "PetalLengthCm",
        "PetalWidthCm",
    ]
    assert df.num_features == len(df.features)
    assert df.start_column == 1


def test_load_iris_caps_rows_at_150(tmp_path):
    body = "".join(f"{i},1.0,2.0,3.0,{i}.0,x\n" for i in range(1, 201))
    df = load_iris(_write(tmp_path / "Iris.csv", "header\n" + body))
    assert df.max_rows == 150
    assert df.data[-1][3] == 150.0


def test_load_iris_ignores_blank_lines(tmp_path):
    df = load_iris(_write(tmp_path / "Iris.csv", IRIS_TEXT + "\n\n"))
    assert len(df.data) == 3


def test_load_iris_rejects_malformed_row(tmp_path):
    path = _write(tmp_path / "Iris.csv", "header\n1,abc,3.5,1.4,0.2,x\n")
    with pytest.raises(ValueError):
        load_iris(path)


def test_load_iris_rejects_short_row(tmp_path):
    path = _write(tmp_path / "Iris.csv", "header\n1,5.1,3.5\n")
    with pytest.raises(ValueError):
        load_iris(path)


def test_load_iris_missing_file(tmp_path):
    with pytest.raises(FileNotFoundError):
        load_iris(tmp_path / "absent.csv")


def test_load_rice_skips_arff_header(tmp_path):
    header = "".join(f"% comment {i}\n" for i in range(16))
    rows = "1.0,2.0,3.0,0.5,100.0,0.7,Cammeo\n7.0,8.0,9.0,0.25,200.0,0.5,Osmancik\n"
    df = load_rice(_write(tmp_path / "rice.arff", header + rows))
    assert df.name == "rice"
    assert df.data == [
        [1.0, 2.0, 3.0, 0.5, 100.0, 0.7],
        [7.0, 8.0, 9.0, 0.25, 200.0, 0.5],
    ]
    assert df.features[0] == "PerimeterReal"
    assert df.features[-1] == "ExtentReal"
    assert df.end_column == df.num_features


def test_load_rice_header_lines_are_never_data(tmp_path):
    header = "".join("1.0,1.0,1.0,1.0,1.0,1.0,X\n" for _ in range(16))
    df = load_rice(_write(tmp_path / "rice.arff", header + "2.0,2.0,2.0,2.0,2.0,2.0,Y\n"))
    assert df.data == [[2.0] * 6]


def test_load_htru2_has_no_header(tmp_path):
    text = "1.5,2.5,3.5,4.5,5.5,6.5,7.5,8.5,0\n9.0,8.0,7.0,6.0,5.0,4.0,3.0,2.0,1\n"
    df = load_htru2(_write(tmp_path / "HTRU_2.csv", text))
    assert df.name == "htru2"
    assert df.data[0] == [1.5, 2.5, 3.5, 4.5, 5.5, 6.5, 7.5, 8.5]
    assert df.data[1] == [9.0, 8.0, 7.0, 6.0, 5.0, 4.0, 3.0, 2.0]
    assert df.max_rows == 2
    assert df.end_column == df.num_features - 1
    assert df.features[4] == "dmMean"


WESAD_TEXT = (
    "# OpenSignals Text File Format\n"
    "# {\"device\": \"made-up\"}\n"
    "# EndOfHeader\n"
    "0\t0\t10\t11\t12\t13\t14\t15\t16\t17\n"
    "1\t0\t20\t21\t22\n"
    "2\t0\t30\t31\t32\t33\t34\t35\t36\t37\n"
    "not\ta\tsample\n"
)


def test_load_wesad_keeps_first_six_channels(tmp_path):
    df = load_wesad(_write(tmp_path / "S4_respiban.txt", WESAD_TEXT))
    assert df.name == "wesad"
    assert df.data == [
        [10.0, 11.0, 12.0, 13.0, 14.0, 15.0],
        [30.0, 31.0, 32.0, 33.0, 34.0, 35.0],
    ]
    assert df.max_rows == len(df.data)
    assert df.features == ["ECG", "EDA", "EMG", "TEMP", "XYZ", "RESPIRATION"]


def test_load_wesad_without_end_marker_has_no_rows(tmp_path):
    text = "0\t0\t10\t11\t12\t13\t14\t15\t16\t17\n"
    df = load_wesad(_write(tmp_path / "S4_respiban.txt", text))
    assert df.data == []
    assert df.max_rows == 0


def test_load_dataset_uses_base_dir(tmp_path):
    _write(tmp_path / "Iris.csv", IRIS_TEXT)
    df = load_dataset("iris", tmp_path)
    assert isinstance(df, Dataframe)
    assert df.name == "iris"
    assert len(df.data) == 3


def test_load_dataset_finds_wesad_path(tmp_path):
    _write(tmp_path / "data/wesad/WESAD/S4/S4_respiban.txt", WESAD_TEXT)
    df = load_dataset("wesad", str(tmp_path))
    assert df.data[1][0] == 30.0


def test_load_dataset_unknown_name():
    with pytest.raises(UnknownDatasetError) as info:
        load_dataset("mnist")
    assert info.value.name == "mnist"
    assert "mnist" in str(info.value)


def test_load_dataset_missing_file(tmp_path):
    with pytest.raises(FileNotFoundError):
        load_dataset("rice", tmp_path)