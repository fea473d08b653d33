from PySide6.QtWidgets import QWidget, QFormLayout, QLineEdit, QPushButton, QMessageBox, QLabel, QVBoxLayout
from PySide6.QtCore import Signal

from markerglobe.intake import LocationIntake


class LocationForm(QWidget):
    '''Latitude / longitude / name inputs with an "Add" button

    Signals
    -------
    sigSubmitted : SubmitResult
        Emitted after every press of the button
    '''

    sigSubmitted = Signal(object)

    def __init__(self, intake: LocationIntake, parent=None):
        super().__init__(parent)
        self.intake = intake

        vbox = QVBoxLayout()
        vbox.addWidget(QLabel('<b>Add location</b>'))

        form = QFormLayout()
        self.latitude_edit = QLineEdit()
        self.latitude_edit.setPlaceholderText('55.755864')
        form.addRow('Latitude', self.latitude_edit)

        self.longitude_edit = QLineEdit()
        self.longitude_edit.setPlaceholderText('37.617698')
        form.addRow('Longitude', self.longitude_edit)

        self.name_edit = QLineEdit()
        self.name_edit.setPlaceholderText('Moscow')
        form.addRow('Name', self.name_edit)
        vbox.addLayout(form)

        self.add_button = QPushButton('Add')
        self.add_button.clicked.connect(self.on_add)
        vbox.addWidget(self.add_button)
        vbox.addStretch()

        self.setLayout(vbox)

    def values(self) -> tuple[str, str, str]:
        return (self.latitude_edit.text(), self.longitude_edit.text(), self.name_edit.text())

    def clear(self) -> None:
        self.latitude_edit.clear()
        self.longitude_edit.clear()
        self.name_edit.clear()

    def alert(self, message: str) -> None:
        """Blocking notification used by the intake"""
        QMessageBox.warning(self, 'Add location', message)

    def on_add(self):
        result = self.intake.submit(*self.values(), fields=self)
        self.sigSubmitted.emit(result)
